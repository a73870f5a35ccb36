"""Shared typed models.

This module defines immutable data models used by the uploader,
registry, and processing layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

VersionCondition = Union[Callable[..., bool], str]
StepCondition = Union[Callable[[Any, Any], bool], str]


@dataclass(frozen=True)
class VersionOptions:
    """Options attached to a registered version.

    Attributes:
        condition: Callable or uploader method name deciding whether the
            version is generated for the current file.
        from_version: Sibling version whose cached output feeds this one.
    """

    condition: VersionCondition | None = None
    from_version: str | None = None


@dataclass(frozen=True)
class VersionDefinition:
    """Registered version entry.

    Attributes:
        name: Version name, unique within one registry.
        uploader: Producer class instantiated for this version.
        options: Options given on first registration.
    """

    name: str
    uploader: type
    options: VersionOptions = field(default_factory=VersionOptions)


@dataclass(frozen=True)
class ProcessingStep:
    """One step of an uploader processing pipeline.

    Attributes:
        step: Callable taking the uploader, or an uploader method name.
        args: Positional arguments passed after the uploader.
        kwargs: Keyword arguments passed to the step.
        condition: Optional callable or method name gating the step.
    """

    step: Callable[..., Any] | str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    condition: StepCondition | None = None

    @property
    def label(self) -> str:
        """Readable step name for logs and errors."""
        if isinstance(self.step, str):
            return self.step
        return getattr(self.step, "__name__", repr(self.step))
