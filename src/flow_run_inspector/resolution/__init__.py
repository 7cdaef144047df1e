"""Pure resolution helpers over flow trees and run results.

Submodules:
    flow_traversal: structural search over the flow tree (Path Resolver)
    output_locator: step output lookup through loop iteration snapshots
    failure_finder: failed step search and loop display-state aggregation
    status_presentation: status to visual indicator mapping
"""

__all__ = [
    "flow_traversal",
    "output_locator",
    "failure_finder",
    "status_presentation",
]
