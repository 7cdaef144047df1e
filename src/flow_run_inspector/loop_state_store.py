"""File persistence for a loop display state.

The loop display state (loop name -> selected iteration index) belongs to the
caller. The CLI keeps it between invocations in a small JSON file so a later
`loops-state` call can start from the previous selection.

`store_loop_state` writes atomically (temporary file then rename) so an
interrupted write never leaves a truncated state file behind.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)


def load_loop_state(path: str) -> Optional[Dict[str, int]]:
    """Load a loop display state from a JSON file.

    Missing, unreadable, empty or malformed files yield None. Entries whose value is not a
    non-negative integer are dropped.

    Args:
        path: The path to the state file.

    Returns:
        The loop name -> index mapping, or None if nothing usable was stored.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read().strip()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read loop state file %s: %s", path, e)
        return None
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed loop state file %s", path)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring loop state file %s (expected a JSON object)", path)
        return None
    return {
        str(name): index
        for name, index in data.items()
        if isinstance(index, int) and not isinstance(index, bool) and index >= 0
    }


def store_loop_state(path: str, state: Mapping[str, int]) -> None:
    """Atomically store a loop display state to a JSON file.

    Args:
        path: The path to the state file.
        state: Loop name -> iteration index mapping to persist.
    """
    tmp_path = f"{path}.tmp"
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(dict(state), f, sort_keys=True)
    os.replace(tmp_path, path)


__all__ = ["load_loop_state", "store_loop_state"]
