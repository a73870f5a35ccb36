"""Processing pipeline runner.

This module applies an uploader's registered processing steps to its
cached file in place. Steps run in registration order between cache and
store for every node of a version tree.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from core.errors import OffshootError, OffshootProcessingError
from core.logging_config import get_logger
from core.types import ProcessingStep, StepCondition

_LOGGER = get_logger(__name__)


def run_processing_steps(uploader: Any, steps: Iterable[ProcessingStep], file: Any) -> int:
    """Run processing steps against an uploader's cached file.

    Args:
        uploader: Uploader whose cached file is processed.
        steps: Ordered processing steps.
        file: File handed to step conditions.

    Returns:
        Number of steps that ran.

    Raises:
        OffshootProcessingError: If a step fails.
    """
    ran = 0
    for step in steps:
        if not condition_allows(uploader, step.condition, file):
            continue
        action = _resolve_action(uploader, step)
        try:
            action(*step.args, **step.kwargs)
        except OffshootError:
            raise
        except Exception as error:
            raise OffshootProcessingError(
                f"Processing step '{step.label}' failed for {type(uploader).__name__}: "
                f"{error}. Fix the step or disable processing."
            ) from error
        ran += 1
    if ran:
        _LOGGER.debug(
            "file_processed",
            uploader=type(uploader).__name__,
            version=uploader.version_name,
            steps=ran,
        )
    return ran


def condition_allows(uploader: Any, condition: StepCondition | None, file: Any) -> bool:
    """Evaluate a step condition.

    Args:
        uploader: Uploader the condition is evaluated against.
        condition: Callable ``(uploader, file)``, uploader method name, or None.
        file: Current file.

    Returns:
        True when the step should run.
    """
    if condition is None:
        return True
    if callable(condition):
        return bool(condition(uploader, file))
    return bool(getattr(uploader, condition)(file))


def _resolve_action(uploader: Any, step: ProcessingStep) -> Callable[..., Any]:
    if isinstance(step.step, str):
        action = getattr(uploader, step.step, None)
        if action is None or not callable(action):
            raise OffshootProcessingError(
                f"Processing step '{step.step}' is not a method of {type(uploader).__name__}. "
                "Define the method or pass a callable to process()."
            )
        return action
    function = step.step
    return lambda *args, **kwargs: function(uploader, *args, **kwargs)
