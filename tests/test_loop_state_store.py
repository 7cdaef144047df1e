from __future__ import annotations

import json

from flow_run_inspector.loop_state_store import load_loop_state, store_loop_state


def test_missing_file_returns_none(tmp_path):
    assert load_loop_state(str(tmp_path / "absent.json")) is None


def test_empty_or_malformed_file_returns_none(tmp_path):
    empty = tmp_path / "empty.json"
    empty.write_text("  \n", encoding="utf-8")
    assert load_loop_state(str(empty)) is None
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_loop_state(str(broken)) is None
    wrong = tmp_path / "list.json"
    wrong.write_text("[1, 2]", encoding="utf-8")
    assert load_loop_state(str(wrong)) is None


def test_store_then_load(tmp_path):
    path = tmp_path / "nested" / "state.json"
    store_loop_state(str(path), {"loop_b": 3, "loop_a": 0})
    assert load_loop_state(str(path)) == {"loop_a": 0, "loop_b": 3}
    assert not (tmp_path / "nested" / "state.json.tmp").exists()


def test_invalid_entries_dropped(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps({"ok": 2, "neg": -1, "text": "3", "flag": True, "float": 1.5}),
        encoding="utf-8",
    )
    assert load_loop_state(str(path)) == {"ok": 2}


def test_unreadable_path_returns_none(tmp_path):
    assert load_loop_state(str(tmp_path)) is None
    latin = tmp_path / "latin.json"
    latin.write_bytes(b'{"loop": 1, "\xff": 2}')
    assert load_loop_state(str(latin)) is None
