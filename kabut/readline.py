"""Interactive line reading with readline-style editing keys and history."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

from kabut.buffers import HistoryRing
from kabut.line_edit import LineEditState

CLEAR_LINE = "\x1b[2K"
CLEAR_SCREEN = "\x1b[H\x1b[2J\x1b[3J"

DELETE = "\x7f"
BACKSPACE = "\x08"
ESCAPE = "\x1b"
CONTROL_A = "\x01"
CONTROL_B = "\x02"
CONTROL_C = "\x03"
CONTROL_D = "\x04"
CONTROL_E = "\x05"
CONTROL_F = "\x06"
CONTROL_K = "\x0b"
CONTROL_L = "\x0c"
CONTROL_T = "\x14"
CONTROL_W = "\x17"


class CrustyLineError(Exception):
    """Base class for errors raised while reading a line."""


class UnexpectedEndOfInput(CrustyLineError):
    """The input ended before a line was complete."""

    def __init__(self, message: str = "Unexpected end of input") -> None:
        super().__init__(message)


class ReaderError(CrustyLineError):
    """Reading the next character of input failed."""

    def __init__(self, message: str = "Error reading input") -> None:
        super().__init__(message)


class _Writer(Protocol):
    def write(self, text: str) -> object: ...


def _next_char(reader: Iterator[str]) -> str:
    try:
        return next(reader)
    except StopIteration:
        raise UnexpectedEndOfInput() from None
    except Exception as exc:
        raise ReaderError() from exc


def _is_ascii_control(c: str) -> bool:
    code = ord(c)
    return code < 0x20 or code == 0x7F


class CrustyLine:
    """Reads lines of user input, echoing edits and keeping a history ring.

    Each line may hold at most ``buffer_size`` bytes of UTF-8 text and up to
    ``history_size`` lines are remembered.
    """

    def __init__(self, buffer_size: int = 64, history_size: int = 8) -> None:
        self._state = LineEditState(HistoryRing(buffer_size, history_size))
        state = self._state
        # Key -> (action, whether the key only moves the cursor)
        self._keys: dict[str, tuple[Callable[[], object], bool]] = {
            DELETE: (state.delete_prev, False),
            BACKSPACE: (state.delete_prev, False),
            CONTROL_A: (state.move_to_start, True),
            CONTROL_B: (lambda: state.shift_left(1), True),
            CONTROL_D: (state.delete_current, False),
            CONTROL_E: (state.move_to_end, True),
            CONTROL_F: (lambda: state.shift_right(1), True),
            CONTROL_K: (state.kill_to_end, False),
            CONTROL_T: (state.transpose_chars, False),
            CONTROL_W: (state.kill_prev_word, False),
        }
        self._csi_keys: dict[str, tuple[Callable[[], object], bool]] = {
            "D": (lambda: state.shift_left(1), True),
            "C": (lambda: state.shift_right(1), True),
            "A": (state.prev_history_entry, False),
            "B": (state.next_history_entry, False),
        }
        self._alt_keys: dict[str, tuple[Callable[[], object], bool]] = {
            "b": (state.move_to_prev_start_of_word, True),
            "f": (state.move_past_end_of_word, True),
        }

    def _escape_action(
        self, reader: Iterator[str]
    ) -> tuple[Callable[[], object], bool] | None:
        c = _next_char(reader)
        if c == "[":
            return self._csi_keys.get(_next_char(reader))
        return self._alt_keys.get(c)

    def get_line(self, prompt: object, reader: Iterable[str], writer: _Writer) -> str:
        """Read one line from ``reader`` (an iterable of characters), echoing to ``writer``.

        Returns the line once carriage return is read, or an empty string on
        ctrl+C.
        """
        state = self._state
        if not state.is_empty():
            state.new_history_entry()

        prompt = str(prompt)
        chars = iter(reader)
        writer.write(prompt)

        while True:
            c = _next_char(chars)

            if c == "\r":
                writer.write("\n")
                return state.as_str()
            if c == CONTROL_C:
                writer.write("\n")
                return ""

            if c == CONTROL_L:
                writer.write(CLEAR_SCREEN)
                shift_only = False
            elif c == ESCAPE:
                action = self._escape_action(chars)
                if action is None:
                    continue
                func, shift_only = action
                func()
            elif c in self._keys:
                func, shift_only = self._keys[c]
                func()
            elif _is_ascii_control(c):
                continue
            else:
                if state.insert(c):
                    tail = state.tail()
                    writer.write(c + tail + "\x08" * len(tail.encode("utf-8")))
                continue

            if shift_only:
                writer.write(f"\r{prompt}{state.head()}")
            else:
                writer.write(
                    f"{CLEAR_LINE}\r{prompt}{state.as_str()}\r{prompt}{state.head()}"
                )