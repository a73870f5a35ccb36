"""Unit tests for the processing pipeline runner."""

from __future__ import annotations

from typing import Any

import pytest

from core.errors import OffshootCacheError, OffshootProcessingError
from core.types import ProcessingStep
from transforms.processing import condition_allows, run_processing_steps


class _Recorder:
    version_name = None

    def __init__(self) -> None:
        self.calls: list[str] = []

    def mark(self, label: str) -> None:
        self.calls.append(label)

    def is_text(self, file: Any) -> bool:
        return file == "notes.txt"


def _record(uploader: _Recorder, label: str, suffix: str = "") -> None:
    uploader.calls.append(label + suffix)


def test_steps_run_in_registration_order() -> None:
    """Callables and method names should run in order with their arguments."""
    recorder = _Recorder()
    steps = [
        ProcessingStep(step=_record, args=("first",), kwargs={"suffix": "!"}),
        ProcessingStep(step="mark", args=("second",)),
    ]

    ran = run_processing_steps(recorder, steps, file="notes.txt")

    assert ran == 2
    assert recorder.calls == ["first!", "second"]


def test_conditions_gate_steps() -> None:
    """Steps whose condition is false should be skipped."""
    recorder = _Recorder()
    steps = [
        ProcessingStep(step="mark", args=("text",), condition="is_text"),
        ProcessingStep(step="mark", args=("never",), condition=lambda uploader, file: False),
    ]

    run_processing_steps(recorder, steps, file="notes.txt")

    assert recorder.calls == ["text"]
    assert condition_allows(recorder, None, file=None) is True


def test_step_failure_is_wrapped() -> None:
    """Unexpected step errors should be wrapped with the step name."""

    def _explode(uploader: Any) -> None:
        raise ValueError("bad pixels")

    with pytest.raises(OffshootProcessingError, match="_explode"):
        run_processing_steps(_Recorder(), [ProcessingStep(step=_explode)], file=None)


def test_domain_errors_pass_through() -> None:
    """Offshoot errors raised by a step should propagate unchanged."""

    def _fail(uploader: Any) -> None:
        raise OffshootCacheError("cache gone")

    with pytest.raises(OffshootCacheError):
        run_processing_steps(_Recorder(), [ProcessingStep(step=_fail)], file=None)


def test_unknown_method_name_raises() -> None:
    """A method-name step must exist on the uploader."""
    with pytest.raises(OffshootProcessingError):
        run_processing_steps(_Recorder(), [ProcessingStep(step="resize")], file=None)
