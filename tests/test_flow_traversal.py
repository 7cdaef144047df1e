"""Tests for structural search over the flow tree.

find_path_to_step must keep three outcomes apart: not found (None), top-level
(empty list) and nested (loop ancestors, outermost first).
"""
from __future__ import annotations

from flow_run_inspector.models.flow import (
    BranchAction,
    CodeAction,
    FlowVersion,
    LoopOnItemsAction,
    PieceAction,
    Trigger,
)
from flow_run_inspector.resolution.flow_traversal import (
    find_path_to_step,
    get_all_steps,
    get_step,
    is_child_of,
)


def _flow() -> Trigger:
    """trigger -> step_1 -> loop_1{step_2 -> loop_2{step_3}}
    -> branch_1{ok: step_4 | ko: loop_3{step_5}} -> step_6
    """
    loop_2 = LoopOnItemsAction(name="loop_2", firstLoopAction=CodeAction(name="step_3"))
    loop_1 = LoopOnItemsAction(
        name="loop_1",
        firstLoopAction=CodeAction(name="step_2", nextAction=loop_2),
    )
    branch_1 = BranchAction(
        name="branch_1",
        onSuccessAction=PieceAction(name="step_4"),
        onFailureAction=LoopOnItemsAction(
            name="loop_3", firstLoopAction=CodeAction(name="step_5")
        ),
        nextAction=CodeAction(name="step_6"),
    )
    loop_1.nextAction = branch_1
    return Trigger(name="trigger", nextAction=CodeAction(name="step_1", nextAction=loop_1))


def test_path_not_found_is_none():
    assert find_path_to_step(_flow(), "missing") is None


def test_path_top_level_is_empty_list():
    trigger = _flow()
    assert find_path_to_step(trigger, "step_1") == []
    assert find_path_to_step(trigger, "step_6") == []
    assert find_path_to_step(trigger, "trigger") == []
    # Loops themselves are addressed at their own level
    assert find_path_to_step(trigger, "loop_1") == []


def test_path_single_loop():
    path = find_path_to_step(_flow(), "step_2")
    assert [p.name for p in path] == ["loop_1"]


def test_path_nested_loops_outermost_first():
    path = find_path_to_step(_flow(), "step_3")
    assert [p.name for p in path] == ["loop_1", "loop_2"]
    assert all(isinstance(p, LoopOnItemsAction) for p in path)


def test_path_skips_branches():
    trigger = _flow()
    assert find_path_to_step(trigger, "step_4") == []
    assert [p.name for p in find_path_to_step(trigger, "step_5")] == ["loop_3"]


def test_get_all_steps_pre_order():
    names = [s.name for s in get_all_steps(_flow())]
    assert names == [
        "trigger",
        "step_1",
        "loop_1",
        "step_2",
        "loop_2",
        "step_3",
        "branch_1",
        "step_4",
        "loop_3",
        "step_5",
        "step_6",
    ]


def test_get_step():
    trigger = _flow()
    assert isinstance(get_step(trigger, "loop_2"), LoopOnItemsAction)
    assert get_step(trigger, "nope") is None


def test_is_child_of_descends_nested_chains_only():
    trigger = _flow()
    loop_1 = get_step(trigger, "loop_1")
    branch_1 = get_step(trigger, "branch_1")
    assert is_child_of(loop_1, "step_2")
    assert is_child_of(loop_1, "step_3")
    assert is_child_of(loop_1, "loop_2")
    # Successors are not children
    assert not is_child_of(loop_1, "step_6")
    assert not is_child_of(loop_1, "loop_1")
    assert is_child_of(branch_1, "step_5")
    assert not is_child_of(get_step(trigger, "step_1"), "step_2")


def test_flow_version_parses_nested_json():
    payload = {
        "id": "v1",
        "flowId": "f1",
        "trigger": {
            "name": "trigger",
            "type": "PIECE_TRIGGER",
            "nextAction": {
                "name": "loop_1",
                "type": "LOOP_ON_ITEMS",
                "firstLoopAction": {"name": "step_1", "type": "CODE"},
                "nextAction": {"name": "step_2", "type": "PIECE"},
            },
        },
    }
    version = FlowVersion.model_validate(payload)
    loop = version.trigger.nextAction
    assert isinstance(loop, LoopOnItemsAction)
    assert isinstance(loop.firstLoopAction, CodeAction)
    assert isinstance(loop.nextAction, PieceAction)
    assert [p.name for p in find_path_to_step(version.trigger, "step_1")] == ["loop_1"]


def test_search_does_not_mutate_tree():
    trigger = _flow()
    before = trigger.model_dump()
    find_path_to_step(trigger, "step_5")
    get_all_steps(trigger)
    assert trigger.model_dump() == before
