"""Byte buffers that back a line editor, including a ring of history buffers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass


class LineEditError(Exception):
    """Raised when a line editing operation fails."""


def _check_size(size: int) -> int:
    if size < 0:
        raise ValueError(f"buffer size must not be negative: {size}")
    return size


class FixedBuffer:
    """A fixed-size byte buffer that never grows."""

    def __init__(self, size: int) -> None:
        self.data = bytearray(_check_size(size))

    def __len__(self) -> int:
        return len(self.data)

    def request_memory(self, nbytes: int) -> int:
        """Refuse any request for more memory; returns the bytes granted (0)."""
        return 0


class GrowableBuffer:
    """A byte buffer that grows by exactly as much as is requested."""

    def __init__(self, size: int) -> None:
        self.data = bytearray(_check_size(size))

    def __len__(self) -> int:
        return len(self.data)

    def request_memory(self, nbytes: int) -> int:
        """Extend the buffer with ``nbytes`` zero bytes and return ``nbytes``."""
        self.data.extend(bytes(nbytes))
        return nbytes


@dataclass
class _Entry:
    data: bytearray
    length: int = 0


class HistoryRing:
    """Fixed-size line buffers kept in a ring of at most ``capacity`` entries.

    ``data`` is always the buffer of the entry currently selected. When the
    ring is full, adding an entry drops the oldest one.
    """

    def __init__(self, size: int, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be at least 1: {capacity}")
        self._entries: deque[_Entry] = deque(maxlen=capacity)
        self._entries.append(_Entry(bytearray(_check_size(size))))
        self._index = 0

    @property
    def _current(self) -> _Entry:
        return self._entries[self._index]

    @property
    def data(self) -> bytearray:
        """The bytes of the currently selected entry."""
        return self._current.data

    def __len__(self) -> int:
        return len(self._current.data)

    def request_memory(self, nbytes: int) -> int:
        """Entries have a fixed size, so no memory is ever granted."""
        return 0

    def new_entry(self, current_entry_size: int) -> None:
        """Record the current entry's size and move to a fresh, empty entry.

        A new entry is only pushed if the newest entry is not already empty.
        """
        self._current.length = current_entry_size
        self._index = len(self._entries) - 1
        newest = self._current
        if newest.length > 0:
            self._entries.append(_Entry(bytearray(newest.data)))
            self._index = len(self._entries) - 1

    def next(self, current_entry_size: int) -> int | None:
        """Switch to the next (newer) entry and return its size, or None."""
        self._current.length = current_entry_size
        index = min(self._index + 1, max(len(self._entries) - 1, 0))
        if index == self._index:
            return None
        self._index = index
        return self._current.length

    def prev(self, current_entry_size: int) -> int | None:
        """Switch to the previous (older) entry and return its size, or None."""
        self._current.length = current_entry_size
        index = max(self._index - 1, 0)
        if index == self._index:
            return None
        self._index = index
        return self._current.length