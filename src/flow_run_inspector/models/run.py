"""Pydantic models for representing the recorded result of a flow run.

A run's `steps` mapping only holds top-level step results plus, for each loop
at the top level, the loop's own output. Results of steps inside a loop body
live in that loop's `output.iterations`, one mapping per executed iteration,
recursively for nested loops.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .flow import ActionType, TriggerType


class StepOutputStatus(str, Enum):
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class FlowRunStatus(str, Enum):
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    STOPPED = "STOPPED"
    FAILED = "FAILED"
    PAUSED = "PAUSED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    TIMEOUT = "TIMEOUT"


class GenericStepOutput(BaseModel):
    """Result of one execution of any non-loop step (trigger included)."""

    type: Literal[
        ActionType.BRANCH,
        ActionType.CODE,
        ActionType.PIECE,
        TriggerType.EMPTY,
        TriggerType.PIECE_TRIGGER,
    ]
    status: StepOutputStatus
    input: Any = None
    output: Any = None
    errorMessage: Any = None
    duration: Optional[int] = None


class LoopStepResult(BaseModel):
    """Aggregated output of a loop: one step-name mapping per executed iteration."""

    item: Any = None
    index: int = 0
    iterations: List[Dict[str, StepOutput]] = Field(default_factory=list)


class LoopStepOutput(BaseModel):
    type: Literal[ActionType.LOOP_ON_ITEMS] = ActionType.LOOP_ON_ITEMS
    status: StepOutputStatus
    input: Any = None
    output: Optional[LoopStepResult] = None
    errorMessage: Any = None
    duration: Optional[int] = None


StepOutput = Annotated[
    Union[LoopStepOutput, GenericStepOutput],
    Field(discriminator="type"),
]


class FlowRun(BaseModel):
    """One execution of a flow version.

    `steps` keeps the order in which the payload listed the step results; that
    order is the scan order used when searching for the failed step.
    """

    id: str = ""
    flowId: str = ""
    flowVersionId: str = ""
    status: FlowRunStatus = FlowRunStatus.RUNNING
    steps: Dict[str, StepOutput] = Field(default_factory=dict)

    def step_entries(self) -> List[Tuple[str, Union[LoopStepOutput, GenericStepOutput]]]:
        return list(self.steps.items())


for _model in (LoopStepResult, LoopStepOutput, FlowRun):
    _model.model_rebuild()


__all__ = [
    "FlowRun",
    "FlowRunStatus",
    "GenericStepOutput",
    "LoopStepOutput",
    "LoopStepResult",
    "StepOutput",
    "StepOutputStatus",
]
