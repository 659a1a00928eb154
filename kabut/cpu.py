"""Processor identifiers: hart IDs, interrupt IDs and register names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from kabut.errors import ErrorKind, KernelError

_U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class HartId:
    """A hardware thread ID."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"hart ID must not be negative: {self.value}")

    @classmethod
    def zero(cls) -> HartId:
        """Hart 0, the primary processor."""
        return cls(0)

    def is_zero(self) -> bool:
        return self.value == 0

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class InterruptId:
    """An interrupt ID, a non-zero unsigned 32-bit number."""

    value: int

    def __post_init__(self) -> None:
        if not 0 < self.value <= _U32_MAX:
            raise ValueError(f"invalid interrupt ID: {self.value}")

    @classmethod
    def from_int(cls, value: int) -> InterruptId:
        """Build an interrupt ID, raising KernelError if out of range or zero."""
        if not 0 <= value <= _U32_MAX:
            raise KernelError(
                ErrorKind.TRY_FROM_INT,
                "out of range integral type conversion attempted",
            )
        if value == 0:
            raise KernelError(ErrorKind.INVALID_INT_ID, value)
        return cls(value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class Register(IntEnum):
    """A RISC-V integer register, numbered as in the instruction encoding."""

    RETURN_ADDRESS = 1
    STACK_POINTER = 2
    GLOBAL_POINTER = 3
    ARG0 = 10
    ARG1 = 11
    ARG2 = 12
    ARG3 = 13
    ARG4 = 14
    ARG5 = 15
    ARG6 = 16
    ARG7 = 17

    def as_str(self) -> str:
        """The register's name as written in assembly."""
        return _REGISTER_NAMES[self]

    def __str__(self) -> str:
        return self.as_str()


_REGISTER_NAMES = {
    Register.RETURN_ADDRESS: "ra",
    Register.STACK_POINTER: "sp",
    Register.GLOBAL_POINTER: "gp",
    **{Register[f"ARG{n}"]: f"a{n}" for n in range(8)},
}