"""Registry of named row-to-event transformations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from redshift_event_import.domain.entities import TransformationEntry
from redshift_event_import.domain.errors import UnknownTransformationError


class TransformationRegistry(Mapping[str, TransformationEntry]):
    """Name to transformation lookup. Entries are never replaced."""

    def __init__(self, entries: Mapping[str, TransformationEntry] | None = None) -> None:
        self._entries: dict[str, TransformationEntry] = {}
        self._frozen = False
        for name, entry in (entries or {}).items():
            self.register(name, entry)

    def register(self, name: str, entry: TransformationEntry) -> None:
        """Add a transformation under a unique name."""

        if self._frozen:
            raise RuntimeError("Transformation registry is frozen.")
        normalized = name.strip()
        if not normalized:
            raise ValueError("Transformation name cannot be empty.")
        if normalized in self._entries:
            raise ValueError(f"Transformation '{normalized}' is already registered.")
        self._entries[normalized] = entry

    def freeze(self) -> TransformationRegistry:
        """Refuse further registrations and return the registry."""

        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_entry(self, name: str) -> TransformationEntry:
        """Return the entry registered under `name` or raise."""

        entry = self._entries.get(name)
        if entry is None:
            raise UnknownTransformationError(
                f"Transformation '{name}' is not registered. "
                f"Known transformations: {', '.join(sorted(self._entries)) or '<none>'}."
            )
        return entry

    def __getitem__(self, name: str) -> TransformationEntry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["TransformationRegistry"]
