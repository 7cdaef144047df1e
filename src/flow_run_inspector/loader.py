"""Tolerant parsing of stored flow-version and flow-run payloads.

Exported flow and run JSON comes in a few shapes depending on where it was
taken from (the flow version itself, a flow object wrapping its current
version, an API response wrapping a run, or a bare step mapping). The helpers
here locate the relevant object and validate it into the typed models.

Error policy:
    - Flow versions fail fast: without a trigger nothing can be resolved, so
      `FlowDataError` is raised.
    - Runs fail open only on shape: when no `steps` mapping can be located the
      result is a run with no steps and a logged warning. A located mapping
      that fails validation raises `FlowDataError`, since an empty run would
      read as a healthy one.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .models.flow import FlowVersion
from .models.run import FlowRun

logger = logging.getLogger(__name__)

__all__ = [
    "FlowDataError",
    "build_flow_run",
    "build_flow_version",
    "read_payload",
]


class FlowDataError(ValueError):
    """Raised when a flow-version payload cannot be turned into a FlowVersion."""


def read_payload(path: str | Path) -> Any:
    """Read and decode a JSON file; decoding errors surface as FlowDataError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FlowDataError(f"{path}: invalid JSON ({e})") from e


def _decode(raw: Any) -> Any:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except ValueError:
            logger.debug("Failed to json.loads payload string")
            return None
    return raw


def _find_flow_version_dict(raw: dict[str, Any]) -> Optional[dict[str, Any]]:
    if "trigger" in raw:
        return raw
    for key in ("version", "flowVersion"):
        candidate = raw.get(key)
        if isinstance(candidate, dict) and "trigger" in candidate:
            return candidate
    nested = raw.get("data")
    if isinstance(nested, dict):
        return _find_flow_version_dict(nested)
    return None


def build_flow_version(raw: Any, *, debug: bool = False) -> FlowVersion:
    """Locate and validate a flow version inside a payload.

    Accepted shapes: the flow version itself (`{"trigger": ...}`), a flow
    wrapping it under `version` or `flowVersion`, or either of those under a
    `data` envelope.

    Raises:
        FlowDataError: no trigger found, or the tree fails validation.
    """
    data = _decode(raw)
    if not isinstance(data, dict):
        raise FlowDataError("Flow payload must be a JSON object")
    version = _find_flow_version_dict(data)
    if version is None:
        raise FlowDataError(
            f"No flow trigger found in payload (top-level keys: {list(data.keys())[:20]})"
        )
    try:
        parsed = FlowVersion.model_validate(version)
    except ValidationError as e:
        raise FlowDataError(f"Invalid flow version: {e}") from e
    if debug:
        logger.info(
            "Parsed flow version id=%s trigger=%s", parsed.id, parsed.trigger.name
        )
    return parsed


def _looks_like_step_mapping(raw: dict[str, Any]) -> bool:
    return bool(raw) and all(
        isinstance(v, dict) and "status" in v and "type" in v for v in raw.values()
    )


def build_flow_run(raw: Any, *, debug: bool = False) -> FlowRun:
    """Locate and validate a flow run inside a payload.

    Probes, in order: a run object (`{"steps": ...}`), a run under `run` or
    `data`, and a bare step-name -> output mapping. Falls back to an empty run
    when none of these is present.

    Raises:
        FlowDataError: a located step mapping fails validation.
    """
    data = _decode(raw)
    empty = FlowRun()
    if not isinstance(data, dict):
        logger.warning("Run payload is not a JSON object; using a run with no steps")
        return empty

    candidates: list[dict[str, Any]] = [data]
    for key in ("run", "data"):
        nested = data.get(key)
        if isinstance(nested, dict):
            candidates.append(nested)

    for cand in candidates:
        if isinstance(cand.get("steps"), dict):
            try:
                parsed = FlowRun.model_validate(cand)
            except ValidationError as e:
                raise FlowDataError(f"Invalid run: {e}") from e
            if debug:
                logger.info("Parsed run id=%s with %d step(s)", parsed.id, len(parsed.steps))
            return parsed

    if _looks_like_step_mapping(data):
        try:
            parsed = FlowRun.model_validate({"steps": data})
        except ValidationError as e:
            raise FlowDataError(f"Invalid run steps: {e}") from e
        if debug:
            logger.info("Parsed bare step mapping with %d step(s)", len(parsed.steps))
        return parsed

    logger.warning(
        "No run steps found in payload (top-level keys: %s); using a run with no steps",
        list(data.keys())[:20],
    )
    return empty
