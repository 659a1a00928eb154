"""Editable line of UTF-8 text held in a byte buffer, with cursor movement and killing."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from kabut.buffers import LineEditError


class _Buffer(Protocol):
    data: bytearray

    def __len__(self) -> int: ...

    def request_memory(self, nbytes: int) -> int: ...


def _is_continuation(byte: int) -> bool:
    if byte >= 0xF8:
        raise LineEditError(f"invalid UTF-8 byte: 0x{byte:02x}")
    return 0x80 <= byte < 0xC0


def _sequence_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    raise LineEditError(f"invalid UTF-8 start byte: 0x{lead:02x}")


def _decode(raw: bytes | bytearray) -> str:
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise LineEditError(str(exc)) from exc


class LineEditState:
    """A line being edited, with an insertion point, stored as UTF-8 in ``buffer``.

    The buffer may be a fixed or growable byte buffer, or a history ring; the
    history methods are only available for the latter.
    """

    def __init__(self, buffer: _Buffer) -> None:
        if len(buffer) == 0:
            raise ValueError("buffer must not be zero sized")
        self._buffer = buffer
        self._ptr = 0
        self._length = 0

    @property
    def _data(self) -> bytearray:
        return self._buffer.data

    def as_str(self) -> str:
        """The whole line."""
        return _decode(self._data[: self._length])

    def head(self) -> str:
        """The line up to the insertion point."""
        return _decode(self._data[: self._ptr])

    def tail(self) -> str:
        """The line from the insertion point to the end."""
        return _decode(self._data[self._ptr : self._length])

    def __len__(self) -> int:
        """Length of the line in bytes."""
        return self._length

    def is_empty(self) -> bool:
        return self._length == 0

    def clear(self) -> None:
        self._ptr = 0
        self._length = 0

    def move_to_start(self) -> None:
        self._ptr = 0

    def move_to_end(self) -> None:
        self._ptr = self._length

    def _current_char(self) -> str | None:
        if self._ptr == self._length:
            return None
        size = _sequence_length(self._data[self._ptr])
        if self._ptr + size > self._length:
            raise LineEditError("UTF-8 character overrun")
        return _decode(self._data[self._ptr : self._ptr + size])

    def _prev_char(self) -> str | None:
        if self.shift_left(1) == 0:
            return None
        c = self._current_char()
        self.shift_right(1)
        return c

    def move_to_prev_start_of_word(self) -> None:
        """Move back to the previous start of a word (like alt+b)."""
        self.shift_left(1)

        while True:
            c = self._current_char()
            if c is None:
                return
            if not c.isspace():
                break
            self.shift_left(1)

        while self._ptr > 0:
            c = self._current_char()
            if c is None:
                return
            if c.isspace():
                self.shift_right(1)
                return
            self.shift_left(1)

    def kill_to_end(self) -> str:
        """Remove everything after the insertion point and return it (like ctrl+k)."""
        killed = _decode(self._data[self._ptr : self._length])
        self._length = self._ptr
        return killed

    def transpose_chars(self) -> None:
        """Swap the characters around the insertion point (like ctrl+t)."""
        if self._ptr == 0:
            return
        if self._ptr == self._length:
            self.shift_left(1)
        self.shift_left(1)
        c = self.delete_current()
        self.shift_right(1)
        if c is not None:
            self.insert(c)

    def kill_prev_word(self) -> str:
        """Remove the word before the insertion point and return it (like ctrl+w)."""
        killed: list[str] = []
        seen_word = False
        while True:
            c = self._prev_char()
            if c is None:
                break
            if c.isspace():
                if seen_word:
                    break
            else:
                seen_word = True
            deleted = self.delete_prev()
            if deleted != c:
                raise LineEditError("found a character but could not delete it")
            killed.append(c)
        return "".join(reversed(killed))

    def move_past_end_of_word(self) -> None:
        """Move past the end of the current or next word (like alt+f)."""
        while True:
            c = self._current_char()
            if c is None:
                return
            if not c.isspace():
                break
            self.shift_right(1)

        while True:
            c = self._current_char()
            if c is None or c.isspace():
                return
            self.shift_right(1)

    def shift_left(self, n: int) -> int:
        """Move the insertion point left by up to ``n`` characters; return how many."""
        data = self._data
        shifted = 0
        while shifted < n:
            while self._ptr > 0 and _is_continuation(data[self._ptr - 1]):
                self._ptr -= 1
            if self._ptr == 0:
                break
            self._ptr -= 1
            shifted += 1
        return shifted

    def shift_right(self, n: int) -> int:
        """Move the insertion point right by up to ``n`` characters; return how many."""
        data = self._data
        shifted = 0
        while shifted < n:
            if self._ptr >= self._length:
                break
            self._ptr += 1
            while self._ptr < self._length and _is_continuation(data[self._ptr]):
                self._ptr += 1
            shifted += 1
        return shifted

    def insert_many(self, chars: Iterable[str]) -> int:
        """Insert characters until one does not fit; return how many were inserted."""
        count = 0
        for c in chars:
            if not self.insert(c):
                break
            count += 1
        return count

    def _request_buffer_size(self, needed: int) -> bool:
        additional = needed - len(self._buffer)
        if additional <= 0:
            return True
        return self._buffer.request_memory(additional) >= additional

    def insert(self, c: str) -> bool:
        """Insert one character; return False if the buffer is full."""
        if len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        encoded = c.encode("utf-8")
        size = len(encoded)
        if not self._request_buffer_size(self._length + size):
            return False
        data = self._data
        data[self._ptr + size : self._length + size] = data[self._ptr : self._length]
        data[self._ptr : self._ptr + size] = encoded
        self._ptr += size
        self._length += size
        return True

    def delete_current(self) -> str | None:
        """Delete the character at the insertion point and return it, or None."""
        c = self._current_char()
        if c is None:
            return None
        size = len(c.encode("utf-8"))
        data = self._data
        data[self._ptr : self._length - size] = data[self._ptr + size : self._length]
        self._length -= size
        return c

    def delete_prev(self) -> str | None:
        """Delete the character before the insertion point and return it, or None."""
        if self.shift_left(1) == 0:
            return None
        return self.delete_current()

    def _history(self):
        if not hasattr(self._buffer, "new_entry"):
            raise TypeError("buffer does not keep a history")
        return self._buffer

    def new_history_entry(self) -> None:
        """Start a new, empty history entry."""
        self._history().new_entry(self._length)
        self._length = 0
        self._ptr = 0

    def _switch(self, size: int | None) -> int | None:
        if size is not None:
            self._length = size
            self._ptr = size
        return size

    def next_history_entry(self) -> int | None:
        """Switch to the next entry; return its size, or None if there is none."""
        return self._switch(self._history().next(self._length))

    def prev_history_entry(self) -> int | None:
        """Switch to the previous entry; return its size, or None if there is none."""
        return self._switch(self._history().prev(self._length))