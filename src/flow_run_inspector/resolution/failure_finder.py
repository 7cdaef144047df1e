"""Failed step discovery and loop display-state aggregation.

The failed step search is order-first, not severity-first: run entries are
scanned in the order the run recorded them, and the first failing step wins.

1. An entry whose status is FAILED is the answer.
2. Otherwise, a loop entry with recorded output is searched iteration by
   iteration (earliest first), applying the same rule to each iteration's
   entries, recursively for nested loops.
3. Scanning stops at the first hit; None means no step failed.

`find_loops_state` then selects, for every loop of the flow, the iteration to
display: LAST_ITERATION for loops enclosing the failed step, otherwise the
caller's previous selection or 0.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ..models.flow import FlowVersion, LoopOnItemsAction
from ..models.run import FlowRun, LoopStepOutput, LoopStepResult, StepOutput, StepOutputStatus
from .flow_traversal import get_all_steps, is_child_of
from .output_locator import LAST_ITERATION

logger = logging.getLogger(__name__)

__all__ = [
    "find_failed_step",
    "find_failed_step_in_loop",
    "find_loops_state",
]


def _find_in_entries(entries: Iterable[Tuple[str, StepOutput]]) -> Optional[str]:
    for step_name, step in entries:
        if step.status == StepOutputStatus.FAILED:
            return step_name
        if isinstance(step, LoopStepOutput) and step.output is not None:
            nested = find_failed_step_in_loop(step.output)
            if nested is not None:
                return nested
    return None


def find_failed_step_in_loop(loop_result: LoopStepResult) -> Optional[str]:
    """Search a loop's iterations in order for the first failed step."""
    for iteration in loop_result.iterations:
        found = _find_in_entries(iteration.items())
        if found is not None:
            return found
    return None


def find_failed_step(run: FlowRun) -> Optional[str]:
    """Return the name of the first failed step of a run at any depth, or None."""
    failed = _find_in_entries(run.step_entries())
    if failed is not None:
        logger.debug("failed step found run=%s step=%s", run.id, failed)
    return failed


def find_loops_state(
    flow_version: FlowVersion,
    run: FlowRun,
    current_loops_state: Mapping[str, int],
) -> Dict[str, int]:
    """Compute the iteration to display for every loop of a flow version.

    Args:
        flow_version: Flow version the run executed
        run: The run being displayed
        current_loops_state: Caller's previous loop name -> index selection

    Returns:
        A new mapping holding every entry of `current_loops_state` plus one
        entry per loop in the flow. Loops enclosing the failed step are set to
        LAST_ITERATION; other loops keep their previous index or default to 0.
    """
    loops = [
        step
        for step in get_all_steps(flow_version.trigger)
        if isinstance(step, LoopOnItemsAction)
    ]
    failed_step = find_failed_step(run) if run.steps else None
    state: Dict[str, int] = dict(current_loops_state)
    for loop in loops:
        if failed_step is not None and is_child_of(loop, failed_step):
            state[loop.name] = LAST_ITERATION
        else:
            state[loop.name] = current_loops_state.get(loop.name, 0)
    return state
