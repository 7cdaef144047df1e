"""Public facade for flow run inspection.

This module provides the stable public API used by display code. All logic
lives in the flow_run_inspector.resolution package; the facade lets the
internals move without breaking imports.

Public Functions:
    find_failed_step: Name of the first failed step of a run, or None
    find_loops_state: Loop name -> iteration index to display
    extract_step_output: Output of a step for selected loop iterations
    extract_displayed_step_output: Same, clamping indexes to recorded iterations
    find_path_to_step: Loop ancestors of a step, or None when absent
    get_status_icon_for_step / get_status_icon: Status presentation lookups

Typical display flow:
    1. failed = find_failed_step(run)
    2. state = find_loops_state(flow_version, run, previous_state)
    3. output = extract_displayed_step_output(name, state, run.steps, trigger)
"""
from __future__ import annotations

from .resolution.failure_finder import (
    find_failed_step,
    find_failed_step_in_loop,
    find_loops_state,
)
from .resolution.flow_traversal import (
    find_path_to_step,
    get_all_steps,
    get_step,
    is_child_of,
)
from .resolution.output_locator import (
    LAST_ITERATION,
    clamp_loop_index,
    extract_displayed_step_output,
    extract_step_output,
)
from .resolution.status_presentation import (
    StatusPresentation,
    StatusVariant,
    get_status_icon,
    get_status_icon_for_step,
)

__all__ = [
    "LAST_ITERATION",
    "StatusPresentation",
    "StatusVariant",
    "clamp_loop_index",
    "extract_displayed_step_output",
    "extract_step_output",
    "find_failed_step",
    "find_failed_step_in_loop",
    "find_loops_state",
    "find_path_to_step",
    "get_all_steps",
    "get_status_icon",
    "get_status_icon_for_step",
    "get_step",
    "is_child_of",
]
