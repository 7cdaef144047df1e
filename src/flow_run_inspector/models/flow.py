"""Pydantic models for representing a flow version's step tree.

A flow version is a trigger followed by a singly linked chain of actions.
Loop actions own a nested body chain (`firstLoopAction`) that runs once per
item; branch actions own two nested chains (`onSuccessAction` and
`onFailureAction`). Every step name is unique within one flow version.

The models mirror the JSON shape of stored flow versions (camelCase keys) so
payloads can be validated directly. They are used as read-only snapshots by
the `resolution` package.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field


class ActionType(str, Enum):
    """Action variants a flow step can take."""

    LOOP_ON_ITEMS = "LOOP_ON_ITEMS"
    BRANCH = "BRANCH"
    CODE = "CODE"
    PIECE = "PIECE"


class TriggerType(str, Enum):
    EMPTY = "EMPTY"
    PIECE_TRIGGER = "PIECE_TRIGGER"


class FlowVersionState(str, Enum):
    LOCKED = "LOCKED"
    DRAFT = "DRAFT"


class _StepBase(BaseModel):
    name: str
    displayName: str = ""
    valid: bool = True
    settings: Dict[str, Any] = Field(default_factory=dict)


class CodeAction(_StepBase):
    type: Literal[ActionType.CODE] = ActionType.CODE
    nextAction: Optional[Action] = None


class PieceAction(_StepBase):
    type: Literal[ActionType.PIECE] = ActionType.PIECE
    nextAction: Optional[Action] = None


class LoopOnItemsAction(_StepBase):
    """Repeats its body chain once per item; the body starts at `firstLoopAction`."""

    type: Literal[ActionType.LOOP_ON_ITEMS] = ActionType.LOOP_ON_ITEMS
    firstLoopAction: Optional[Action] = None
    nextAction: Optional[Action] = None


class BranchAction(_StepBase):
    """Runs one of two nested chains depending on its condition."""

    type: Literal[ActionType.BRANCH] = ActionType.BRANCH
    onSuccessAction: Optional[Action] = None
    onFailureAction: Optional[Action] = None
    nextAction: Optional[Action] = None


Action = Annotated[
    Union[CodeAction, PieceAction, LoopOnItemsAction, BranchAction],
    Field(discriminator="type"),
]


class Trigger(_StepBase):
    """Root of a flow version; the action chain starts at `nextAction`."""

    type: TriggerType = TriggerType.EMPTY
    nextAction: Optional[Action] = None


# Either a trigger or one of the action variants.
FlowNode = Union[Trigger, CodeAction, PieceAction, LoopOnItemsAction, BranchAction]


class FlowVersion(BaseModel):
    """An immutable snapshot of a flow's structure."""

    id: str = ""
    flowId: str = ""
    displayName: str = ""
    trigger: Trigger
    valid: bool = True
    state: FlowVersionState = FlowVersionState.DRAFT


for _model in (CodeAction, PieceAction, LoopOnItemsAction, BranchAction, Trigger, FlowVersion):
    _model.model_rebuild()


__all__ = [
    "Action",
    "ActionType",
    "BranchAction",
    "CodeAction",
    "FlowNode",
    "FlowVersion",
    "FlowVersionState",
    "LoopOnItemsAction",
    "PieceAction",
    "Trigger",
    "TriggerType",
]
