from __future__ import annotations

from flow_run_inspector.models.run import FlowRunStatus, StepOutputStatus
from flow_run_inspector.run_utils import (
    StatusVariant,
    get_status_icon,
    get_status_icon_for_step,
)


def test_every_step_status_has_presentation():
    for status in StepOutputStatus:
        assert get_status_icon_for_step(status).variant in set(StatusVariant)


def test_every_run_status_has_presentation():
    for status in FlowRunStatus:
        assert get_status_icon(status).variant in set(StatusVariant)


def test_step_variants():
    assert get_status_icon_for_step(StepOutputStatus.RUNNING).variant == StatusVariant.NEUTRAL
    assert get_status_icon_for_step(StepOutputStatus.PAUSED).variant == StatusVariant.NEUTRAL
    assert get_status_icon_for_step(StepOutputStatus.STOPPED).variant == StatusVariant.SUCCESS
    assert get_status_icon_for_step(StepOutputStatus.SUCCEEDED).icon == "circle-check"
    assert get_status_icon_for_step(StepOutputStatus.FAILED) == (StatusVariant.ERROR, "circle-x")


def test_run_variants():
    for status in (
        FlowRunStatus.FAILED,
        FlowRunStatus.QUOTA_EXCEEDED,
        FlowRunStatus.INTERNAL_ERROR,
        FlowRunStatus.TIMEOUT,
    ):
        assert get_status_icon(status).variant == StatusVariant.ERROR
    assert get_status_icon(FlowRunStatus.STOPPED).variant == StatusVariant.SUCCESS
    assert get_status_icon(FlowRunStatus.PAUSED).icon == "pause"
    assert get_status_icon(FlowRunStatus.RUNNING).variant == StatusVariant.NEUTRAL


def test_accepts_raw_status_values():
    assert get_status_icon("TIMEOUT").variant == StatusVariant.ERROR
    assert get_status_icon_for_step("SUCCEEDED").variant == StatusVariant.SUCCESS
