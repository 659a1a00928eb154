"""Types shared between the kernel and user programs: PIDs, file descriptors, syscalls."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum

_U16_MAX = 0xFFFF


class KrabbyAbiError(Exception):
    """Base class for errors raised by the ABI types."""


class InvalidPidError(KrabbyAbiError, ValueError):
    """A value cannot be used as a process ID."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid PID: {value}")
        self.value = value


class InvalidFileDescriptorError(KrabbyAbiError, ValueError):
    """A value cannot be used as a file descriptor."""

    def __init__(self, value: int) -> None:
        super().__init__(f"Invalid file descriptor: {value}")
        self.value = value


class ProcessError(IntEnum):
    """Exit error code of a process."""

    FAILURE = 1


@dataclass(frozen=True, order=True)
class FileDescriptor:
    """A file descriptor, an unsigned 16-bit number."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _U16_MAX:
            raise InvalidFileDescriptorError(self.value)

    @classmethod
    def from_usize(cls, fd: int) -> FileDescriptor:
        """Build a descriptor, raising InvalidFileDescriptorError if out of range."""
        return cls(fd)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


_pid_lock = threading.Lock()
_pid_next = 1


@dataclass(frozen=True)
class Pid:
    """A process ID, a non-zero unsigned 16-bit number."""

    value: int

    def __post_init__(self) -> None:
        if not 0 < self.value <= _U16_MAX:
            raise InvalidPidError(self.value)

    @classmethod
    def generate(cls) -> Pid:
        """Return a fresh PID, counting up from 1."""
        global _pid_next
        with _pid_lock:
            value = _pid_next
            _pid_next = (_pid_next + 1) & _U16_MAX
        pid = cls.maybe_from_u16(value)
        if pid is None:
            raise RuntimeError("Invalid PID generated")
        return pid

    @classmethod
    def maybe_from_u16(cls, val: int) -> Pid | None:
        """Return None for zero, else a PID."""
        if not 0 <= val <= _U16_MAX:
            raise ValueError(f"not an unsigned 16-bit value: {val}")
        return None if val == 0 else cls(val)

    @classmethod
    def maybe_from_usize(cls, val: int) -> Pid | None:
        """Return None for zero, else a PID; raise InvalidPidError if out of range."""
        if not 0 <= val <= _U16_MAX:
            raise InvalidPidError(val)
        return cls.maybe_from_u16(val)

    @classmethod
    def from_usize(cls, val: int) -> Pid:
        """Return a PID, raising InvalidPidError for zero or out-of-range values."""
        pid = cls.maybe_from_usize(val)
        if pid is None:
            raise InvalidPidError(val)
        return pid

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class Syscall(IntEnum):
    """System call numbers."""

    PUT_CHAR = 1
    GET_CHAR = 2
    PUT_STRING = 3
    PINFO = 4
    FORK = 5
    EXIT = 6
    WAIT_PID = 7
    SLEEP = 8
    REQUEST_MEMORY = 9
    POWER_OFF = 10
    """Power off the device."""
    TEST = 11
    """Development only: may do anything."""
    OPEN = 12
    """Open a file."""