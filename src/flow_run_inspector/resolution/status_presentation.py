"""Status to visual indicator mapping for runs and steps.

Each step or run status maps to a severity variant (neutral, success, error)
and an icon name. The tables are checked against the status enums when this
module is imported, so adding a status without a presentation fails fast.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple

from ..models.run import FlowRunStatus, StepOutputStatus

__all__ = [
    "StatusPresentation",
    "StatusVariant",
    "get_status_icon",
    "get_status_icon_for_step",
]


class StatusVariant(str, Enum):
    NEUTRAL = "neutral"
    SUCCESS = "success"
    ERROR = "error"


class StatusPresentation(NamedTuple):
    variant: StatusVariant
    icon: str


_STEP_PRESENTATION: Dict[StepOutputStatus, StatusPresentation] = {
    StepOutputStatus.RUNNING: StatusPresentation(StatusVariant.NEUTRAL, "timer"),
    StepOutputStatus.PAUSED: StatusPresentation(StatusVariant.NEUTRAL, "pause-circle"),
    StepOutputStatus.STOPPED: StatusPresentation(StatusVariant.SUCCESS, "circle-check"),
    StepOutputStatus.SUCCEEDED: StatusPresentation(StatusVariant.SUCCESS, "circle-check"),
    StepOutputStatus.FAILED: StatusPresentation(StatusVariant.ERROR, "circle-x"),
}

_RUN_PRESENTATION: Dict[FlowRunStatus, StatusPresentation] = {
    FlowRunStatus.RUNNING: StatusPresentation(StatusVariant.NEUTRAL, "timer"),
    FlowRunStatus.SUCCEEDED: StatusPresentation(StatusVariant.SUCCESS, "check"),
    FlowRunStatus.STOPPED: StatusPresentation(StatusVariant.SUCCESS, "check"),
    FlowRunStatus.FAILED: StatusPresentation(StatusVariant.ERROR, "x"),
    FlowRunStatus.PAUSED: StatusPresentation(StatusVariant.NEUTRAL, "pause"),
    FlowRunStatus.QUOTA_EXCEEDED: StatusPresentation(StatusVariant.ERROR, "x"),
    FlowRunStatus.INTERNAL_ERROR: StatusPresentation(StatusVariant.ERROR, "x"),
    FlowRunStatus.TIMEOUT: StatusPresentation(StatusVariant.ERROR, "x"),
}


def _check_exhaustive(table: Dict, enum_cls: type[Enum]) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(
            f"No status presentation for {enum_cls.__name__} members: {', '.join(missing)}"
        )


_check_exhaustive(_STEP_PRESENTATION, StepOutputStatus)
_check_exhaustive(_RUN_PRESENTATION, FlowRunStatus)


def get_status_icon_for_step(status: StepOutputStatus) -> StatusPresentation:
    return _STEP_PRESENTATION[StepOutputStatus(status)]


def get_status_icon(status: FlowRunStatus) -> StatusPresentation:
    return _RUN_PRESENTATION[FlowRunStatus(status)]
