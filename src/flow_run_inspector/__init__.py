"""Package initialization for flow-run-inspector.

Having this file allows relative imports (e.g. `from .models import ...`) to
resolve under tooling (mypy/ruff) and matches the CLI usage pattern
`python -m flow_run_inspector failed-step` documented in the README.
"""

__all__ = []
