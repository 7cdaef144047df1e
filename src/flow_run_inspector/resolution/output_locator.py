"""Step output lookup through nested loop iteration snapshots.

A run only records top-level step results. The result of a step nested in
loops `L1 -> L2 -> step` is found at
`steps[L1].output.iterations[i1][L2].output.iterations[i2][step]`, where the
iteration indexes come from a caller-supplied loop-name -> index mapping.

Every link of that chain is optional: a loop may not have run, may have run
fewer iterations than requested, or the caller may not have selected an
index. Any missing link yields None; nothing here raises or indexes out of
range.

Public Functions:
    extract_step_output: Exact-index lookup (out-of-range index -> None)
    extract_displayed_step_output: Lookup clamping each index to the last
        recorded iteration, for renderers fed with LAST_ITERATION
    clamp_loop_index: Clamp one index against an iteration count
"""
from __future__ import annotations

import logging
import sys
from typing import Dict, List, Mapping, Optional

from ..models.flow import ActionType, LoopOnItemsAction, Trigger
from ..models.run import LoopStepOutput, StepOutput
from .flow_traversal import find_path_to_step

logger = logging.getLogger(__name__)

# Display index meaning "the last iteration"; renderers clamp it.
LAST_ITERATION = sys.maxsize

__all__ = [
    "LAST_ITERATION",
    "clamp_loop_index",
    "extract_displayed_step_output",
    "extract_step_output",
]


def clamp_loop_index(index: int, iteration_count: int) -> int:
    """Clamp a display index into `[0, iteration_count - 1]` (0 when empty)."""
    if iteration_count <= 0:
        return 0
    return max(0, min(index, iteration_count - 1))


def _iteration_snapshot(
    loop_output: Optional[StepOutput],
    loop_name: str,
    loop_indexes: Mapping[str, int],
    clamp: bool,
) -> Optional[Dict[str, StepOutput]]:
    if not isinstance(loop_output, LoopStepOutput) or loop_output.output is None:
        logger.debug("no loop output recorded loop=%s", loop_name)
        return None
    iterations = loop_output.output.iterations
    index = loop_indexes.get(loop_name)
    if index is None:
        if not clamp:
            logger.debug("no iteration selected loop=%s", loop_name)
            return None
        index = 0
    if clamp:
        index = clamp_loop_index(index, len(iterations))
    if not 0 <= index < len(iterations):
        logger.debug(
            "iteration out of range loop=%s index=%s recorded=%d",
            loop_name,
            index,
            len(iterations),
        )
        return None
    return iterations[index]


def _descend(
    ancestors: List[LoopOnItemsAction],
    loop_indexes: Mapping[str, int],
    step_name: str,
    run_output: Mapping[str, StepOutput],
    clamp: bool,
) -> Optional[StepOutput]:
    if not ancestors:
        return None
    child_output: Optional[StepOutput] = run_output.get(ancestors[0].name)
    for position, loop in enumerate(ancestors):
        snapshot = _iteration_snapshot(child_output, loop.name, loop_indexes, clamp)
        if snapshot is None:
            return None
        next_key = (
            ancestors[position + 1].name if position + 1 < len(ancestors) else step_name
        )
        child_output = snapshot.get(next_key)
    return child_output


def _locate(
    step_name: str,
    loop_indexes: Mapping[str, int],
    run_output: Mapping[str, StepOutput],
    trigger: Trigger,
    clamp: bool,
) -> Optional[StepOutput]:
    direct = run_output.get(step_name)
    if direct is not None:
        return direct
    path = find_path_to_step(trigger, step_name)
    if path is None:
        return None
    loops = [
        node
        for node in path
        if getattr(node, "type", None) == ActionType.LOOP_ON_ITEMS
    ]
    return _descend(loops, loop_indexes, step_name, run_output, clamp)


def extract_step_output(
    step_name: str,
    loop_indexes: Mapping[str, int],
    run_output: Mapping[str, StepOutput],
    trigger: Trigger,
) -> Optional[StepOutput]:
    """Return the recorded output of a step for the selected loop iterations.

    Args:
        step_name: Step to look up
        loop_indexes: Loop name -> iteration index for each enclosing loop
        run_output: The run's top-level `steps` mapping
        trigger: Root of the flow version the run executed

    Returns:
        The step's output record, returned unchanged when it is a top-level
        entry; None when the step is unknown, was not reached, or a selected
        iteration does not exist.
    """
    return _locate(step_name, loop_indexes, run_output, trigger, clamp=False)


def extract_displayed_step_output(
    step_name: str,
    loop_indexes: Mapping[str, int],
    run_output: Mapping[str, StepOutput],
    trigger: Trigger,
) -> Optional[StepOutput]:
    """Like `extract_step_output`, clamping each loop index to recorded iterations.

    Missing indexes default to the first iteration and `LAST_ITERATION`
    selects the last one, so a loop display state can be passed as-is.
    """
    return _locate(step_name, loop_indexes, run_output, trigger, clamp=True)
