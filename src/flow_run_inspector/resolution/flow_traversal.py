"""Structural search over a flow version's step tree.

The tree is made of singly linked chains: the trigger's `nextAction` chain,
plus one nested chain per loop body (`firstLoopAction`) and two per branch
(`onSuccessAction`, `onFailureAction`). Only loops change how a step's output
is addressed in a run, so the ancestor path reported by `find_path_to_step`
contains loop actions only.

Public Functions:
    find_path_to_step: Loop ancestors of a step, or None when the step is absent
    get_all_steps: Every node of the tree in pre-order
    get_step: Node lookup by name
    is_child_of: Whether a step lies inside a node's nested chains

Design Invariants:
    - Pure functions: inputs are never mutated
    - Step names are unique within one flow version; behaviour on duplicate
      names or cyclic `nextAction` links is unspecified
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from ..models.flow import BranchAction, FlowNode, LoopOnItemsAction, Trigger

logger = logging.getLogger(__name__)

__all__ = [
    "find_path_to_step",
    "get_all_steps",
    "get_step",
    "is_child_of",
]


def _iter_chain(head: Optional[FlowNode]) -> Iterator[FlowNode]:
    current = head
    while current is not None:
        yield current
        current = current.nextAction


def _nested_heads(node: FlowNode) -> List[Optional[FlowNode]]:
    if isinstance(node, LoopOnItemsAction):
        return [node.firstLoopAction]
    if isinstance(node, BranchAction):
        return [node.onSuccessAction, node.onFailureAction]
    return []


def _search(
    head: Optional[FlowNode],
    target_step_name: str,
    ancestors: List[LoopOnItemsAction],
) -> Optional[List[LoopOnItemsAction]]:
    for node in _iter_chain(head):
        if node.name == target_step_name:
            return list(ancestors)
        inner = ancestors + [node] if isinstance(node, LoopOnItemsAction) else ancestors
        for nested_head in _nested_heads(node):
            found = _search(nested_head, target_step_name, inner)
            if found is not None:
                return found
    return None


def find_path_to_step(
    trigger: Trigger, target_step_name: str
) -> Optional[List[LoopOnItemsAction]]:
    """Return the loop actions enclosing a step, outermost first.

    Args:
        trigger: Root of the flow version
        target_step_name: Name of the step to locate

    Returns:
        - None when no step with that name exists in the tree
        - An empty list when the step exists outside any loop
        - The enclosing loops in root-to-target order otherwise

    Note:
        Branch actions are searched but never reported; they do not nest
        outputs.
    """
    path = _search(trigger, target_step_name, [])
    if path is None:
        logger.debug("step not found in flow tree step=%s", target_step_name)
    return path


def get_all_steps(trigger: Trigger) -> List[FlowNode]:
    """Flatten the tree into a pre-order list, trigger first.

    Nested chains are listed right after the node that owns them and before
    that node's successor.
    """
    steps: List[FlowNode] = []

    def _walk(head: Optional[FlowNode]) -> None:
        for node in _iter_chain(head):
            steps.append(node)
            for nested_head in _nested_heads(node):
                _walk(nested_head)

    _walk(trigger)
    return steps


def get_step(trigger: Trigger, step_name: str) -> Optional[FlowNode]:
    for node in get_all_steps(trigger):
        if node.name == step_name:
            return node
    return None


def is_child_of(parent: FlowNode, child_step_name: str) -> bool:
    """Whether `child_step_name` lies anywhere inside `parent`'s nested chains.

    Steps that merely follow `parent` through its `nextAction` chain are not
    children.
    """
    for nested_head in _nested_heads(parent):
        for node in _iter_chain(nested_head):
            if node.name == child_step_name or is_child_of(node, child_step_name):
                return True
    return False
