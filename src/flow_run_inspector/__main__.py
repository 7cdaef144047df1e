"""Main CLI entry point for flow-run-inspector.

This module provides a command-line interface using Typer over the pure
resolution helpers. Each command:
1.  Loads configuration (`.env` + environment) and configures logging.
2.  Reads the flow version and/or run JSON files (flow_run_inspector.loader).
3.  Runs one resolution (flow_run_inspector.run_utils).
4.  Prints the result as JSON or plain text.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, NoReturn, Optional

import typer
from dotenv import find_dotenv, load_dotenv

from .config import get_settings
from .loader import FlowDataError, build_flow_run, build_flow_version, read_payload
from .loop_state_store import load_loop_state, store_loop_state
from .models.flow import FlowVersion
from .models.run import FlowRun
from .run_utils import (
    extract_displayed_step_output,
    extract_step_output,
    find_failed_step,
    find_loops_state,
    find_path_to_step,
    get_status_icon,
    get_status_icon_for_step,
)

app = typer.Typer(help="Inspect flow runs: failed steps, loop display state and step outputs")

logger = logging.getLogger(__name__)


def _echo_json(value: Any) -> None:
    indent = get_settings().OUTPUT_INDENT or None
    typer.echo(json.dumps(value, indent=indent, ensure_ascii=False))


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _load_flow(flow_file: str) -> FlowVersion:
    try:
        return build_flow_version(read_payload(flow_file), debug=get_settings().DEBUG)
    except (FlowDataError, OSError) as e:
        _fail(f"Cannot load flow version from {flow_file}: {e}")


def _load_run(run_file: str) -> FlowRun:
    try:
        return build_flow_run(read_payload(run_file), debug=get_settings().DEBUG)
    except (FlowDataError, OSError) as e:
        _fail(f"Cannot load run from {run_file}: {e}")


def _parse_indexes(pairs: Optional[List[str]]) -> Dict[str, int]:
    """Parse repeated `LOOP=N` options into a loop name -> index mapping."""
    indexes: Dict[str, int] = {}
    for pair in pairs or []:
        name, sep, value = pair.rpartition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected LOOP=INDEX, got {pair!r}", param_hint="--index")
        try:
            index = int(value)
        except ValueError:
            raise typer.BadParameter(
                f"index for {name.strip()!r} must be an integer", param_hint="--index"
            ) from None
        if index < 0:
            raise typer.BadParameter(
                f"index for {name.strip()!r} must not be negative", param_hint="--index"
            )
        indexes[name.strip()] = index
    return indexes


@app.callback()
def main() -> None:
    """flow-run-inspector CLI.

    Use a subcommand like 'failed-step' to inspect a run.
    """
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    if env_file:
        logger.debug("Loaded environment from %s", env_file)


@app.command(help="Print the loop actions enclosing STEP, outermost first.")
def path(
    flow_file: str = typer.Argument(..., help="Flow version JSON file"),
    step: str = typer.Argument(..., help="Step name"),
) -> None:
    flow = _load_flow(flow_file)
    ancestors = find_path_to_step(flow.trigger, step)
    if ancestors is None:
        _fail(f"Step {step!r} not found in flow")
    _echo_json([loop.name for loop in ancestors])


@app.command("failed-step", help="Print the name of the first failed step, or 'none'.")
def failed_step(
    run_file: str = typer.Argument(..., help="Flow run JSON file"),
) -> None:
    run = _load_run(run_file)
    typer.echo(find_failed_step(run) or "none")


@app.command("loops-state", help="Print the iteration to display for every loop.")
def loops_state(
    flow_file: str = typer.Argument(..., help="Flow version JSON file"),
    run_file: str = typer.Argument(..., help="Flow run JSON file"),
    state_file: Optional[str] = typer.Option(
        None, help="Loop state file (defaults to settings.LOOP_STATE_FILE)"
    ),
    persist: Optional[bool] = typer.Option(
        None,
        "--persist/--no-persist",
        help="Write the computed state back to the state file. If not specified, uses PERSIST_LOOP_STATE from config/env.",
    ),
) -> None:
    settings = get_settings()
    flow = _load_flow(flow_file)
    run = _load_run(run_file)
    effective_state_file = state_file or settings.LOOP_STATE_FILE
    effective_persist = settings.PERSIST_LOOP_STATE if persist is None else persist

    current = load_loop_state(effective_state_file) or {}
    if current:
        logger.info("Loaded loop state for %d loop(s) from %s", len(current), effective_state_file)
    state = find_loops_state(flow, run, current)
    if effective_persist:
        store_loop_state(effective_state_file, state)
        logger.info("Stored loop state to %s", effective_state_file)
    _echo_json(state)


@app.command("step-output", help="Print the recorded output of STEP for the selected loop iterations.")
def step_output(
    flow_file: str = typer.Argument(..., help="Flow version JSON file"),
    run_file: str = typer.Argument(..., help="Flow run JSON file"),
    step: str = typer.Argument(..., help="Step name"),
    index: Optional[List[str]] = typer.Option(
        None, "--index", "-i", help="Iteration to use for a loop, as LOOP=INDEX (repeatable)"
    ),
    clamp: Optional[bool] = typer.Option(
        None,
        "--clamp/--no-clamp",
        help="Clamp indexes to recorded iterations. If not specified, uses CLAMP_LOOP_INDEXES from config/env.",
    ),
) -> None:
    settings = get_settings()
    flow = _load_flow(flow_file)
    run = _load_run(run_file)
    indexes = _parse_indexes(index)
    effective_clamp = settings.CLAMP_LOOP_INDEXES if clamp is None else clamp
    locate = extract_displayed_step_output if effective_clamp else extract_step_output
    output = locate(step, indexes, run.steps, flow.trigger)
    if output is None:
        logger.debug("No output recorded for step=%s indexes=%s", step, indexes)
        _echo_json(None)
        return
    _echo_json(output.model_dump(mode="json"))


@app.command(help="Print the status presentation of a run and its top-level steps.")
def status(
    run_file: str = typer.Argument(..., help="Flow run JSON file"),
) -> None:
    run = _load_run(run_file)
    run_presentation = get_status_icon(run.status)
    steps: Dict[str, Dict[str, str]] = {}
    for name, step in run.step_entries():
        presentation = get_status_icon_for_step(step.status)
        steps[name] = {
            "status": step.status.value,
            "variant": presentation.variant.value,
            "icon": presentation.icon,
        }
    _echo_json(
        {
            "run": {
                "status": run.status.value,
                "variant": run_presentation.variant.value,
                "icon": run_presentation.icon,
            },
            "steps": steps,
        }
    )


if __name__ == "__main__":  # pragma: no cover
    app()
