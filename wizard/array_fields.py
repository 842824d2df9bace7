"""Generic tag-list editing shared by every array-valued field."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class ArrayFieldBuffer:
    """Ordered, de-duplicated list of tags with an optional size cap.

    ``add`` trims the value, ignores blanks and case-insensitive duplicates,
    and is a no-op once ``max_items`` is reached. ``remove`` ignores
    out-of-range indexes. Both return ``True`` when the items changed.
    """

    items: list[str] = field(default_factory=list)
    max_items: int | None = None

    def _contains(self, candidate: str) -> bool:
        marker = candidate.casefold()
        return any(isinstance(existing, str) and existing.casefold() == marker for existing in self.items)

    @property
    def is_full(self) -> bool:
        return self.max_items is not None and len(self.items) >= self.max_items

    def add(self, value: str) -> bool:
        candidate = value.strip() if isinstance(value, str) else ""
        if not candidate or self.is_full or self._contains(candidate):
            return False
        self.items.append(candidate)
        return True

    def remove(self, index: int) -> bool:
        if index < 0 or index >= len(self.items):
            return False
        del self.items[index]
        return True


def add_item(items: Iterable[str], value: str, *, max_items: int | None = None) -> tuple[str, ...]:
    """Return ``items`` with ``value`` appended when the buffer accepts it."""

    buffer = ArrayFieldBuffer(list(items), max_items)
    buffer.add(value)
    return tuple(buffer.items)


def remove_item(items: Iterable[str], index: int) -> tuple[str, ...]:
    """Return ``items`` without the entry at ``index`` (out of range is a no-op)."""

    buffer = ArrayFieldBuffer(list(items))
    buffer.remove(index)
    return tuple(buffer.items)


__all__ = ["ArrayFieldBuffer", "add_item", "remove_item"]
