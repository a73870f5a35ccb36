"""Version registry.

This module holds the per-class mapping from version name to definition.
Each uploader class owns its own registry object; subclasses start from a
copy and version producers start from an empty one.
"""

from __future__ import annotations

from typing import Iterator

from core.types import VersionDefinition


class VersionRegistry:
    """Name-keyed collection of version definitions."""

    def __init__(self, definitions: dict[str, VersionDefinition] | None = None) -> None:
        self._definitions: dict[str, VersionDefinition] = dict(definitions or {})

    def register(self, definition: VersionDefinition) -> VersionDefinition:
        """Add a definition unless the name is taken.

        Args:
            definition: Definition to add.

        Returns:
            The registered definition; the existing one wins on a name clash.
        """
        return self._definitions.setdefault(definition.name, definition)

    def get(self, name: str) -> VersionDefinition | None:
        return self._definitions.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._definitions)

    def items(self) -> list[tuple[str, VersionDefinition]]:
        return list(self._definitions.items())

    def values(self) -> list[VersionDefinition]:
        return list(self._definitions.values())

    def copy(self) -> "VersionRegistry":
        return VersionRegistry(self._definitions)

    def __getitem__(self, name: str) -> VersionDefinition:
        return self._definitions[name]

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"VersionRegistry({list(self._definitions)!r})"
