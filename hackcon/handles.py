"""Generational handles into a slot allocator with a free list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

_U32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class Handle:
    """Reference to a slot: a 1-based offset (0 means null) and a generation counter."""

    offset: int = 0
    counter: int = 0

    def is_null(self) -> bool:
        return self.offset == 0


@dataclass
class _FreeSlot:
    next: int


class HandleAllocator(Generic[T]):
    """Stores values in reusable slots; stale handles translate to ``None``."""

    def __init__(self) -> None:
        self._slots: list[object] = []
        self._counters: list[int] = []
        self._free_list = 0

    def allocate(self, value: T) -> Handle:
        """Store ``value`` and return a handle to it, reusing a freed slot if any."""
        if self._free_list:
            index = self._free_list - 1
            slot = self._slots[index]
            assert isinstance(slot, _FreeSlot)
            self._free_list = slot.next
            self._slots[index] = value
        else:
            index = len(self._slots)
            self._slots.append(value)
            self._counters.append(0)
        return Handle(index + 1, self._counters[index])

    def _live_index(self, handle: Handle) -> int | None:
        index = handle.offset - 1
        if 0 <= index < len(self._slots) and handle.counter == self._counters[index]:
            if not isinstance(self._slots[index], _FreeSlot):
                return index
        return None

    def free(self, handle: Handle) -> None:
        """Release the slot behind ``handle``; invalid handles are ignored."""
        index = self._live_index(handle)
        if index is None:
            return
        self._counters[index] = (self._counters[index] + 1) & _U32_MASK
        self._slots[index] = _FreeSlot(self._free_list)
        self._free_list = index + 1

    def translate(self, handle: Handle) -> T | None:
        """Return the value behind ``handle``, or ``None`` if the handle is not valid."""
        index = self._live_index(handle)
        if index is None:
            return None
        return self._slots[index]  # type: ignore[return-value]

    def reset(self) -> None:
        """Invalidate every handle handed out so far."""
        self._counters = [(counter + 1) & _U32_MASK for counter in self._counters]