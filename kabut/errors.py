"""The kernel's error type and the kinds of error it can carry."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Kinds of kernel error, each with the template used to describe it."""

    template: str

    def __new__(cls, template: str) -> ErrorKind:
        obj = object.__new__(cls)
        obj._value_ = len(cls.__members__) + 1
        obj.template = template
        return obj

    GENERIC = "{}"
    CONVERSION = "Failed conversion"
    FILE_SYSTEM = "Filesystem error: {}"
    DRIVER_FAILURE = "{}"
    INVALID_ARGUMENTS = "Invalid arguments"
    END_OF_INPUT = "Unexpected end of input"
    FORBIDDEN_PAGE = "Forbidden page"
    INVALID_SYSCALL = "Invalid syscall: {}"
    PROCESS_NOT_FOUND = "Process not found: {}"
    INVALID_PID = "Invalid PID: {}"
    INVALID_INT_ID = "Invalid interruptId: {}"
    NULL_POINTER = "Attempted to dereference null pointer"
    DRIVER_UNINITIALIZED = "Driver is uninitialized"
    INTERRUPT_UNAVAILABLE = "Interrupt is unavailable"
    INVALID_VIRTUAL_ADDRESS = "Invalid virtual address: {}"
    INVALID_PHYSICAL_ADDRESS = "Invalid physical address: {}"
    ADDRESS_NOT_PAGE_ALIGNED = "Address not page aligned: {}"
    NOT_MAPPED = "Not mapped: {}"
    SIZE_MISALIGNED = "Size is misaligned: {}"
    MISSING_PROPERTY = "Missing FDT node property: {}"
    FMT = "{}"
    UTF8 = "{}"
    PARSE_INT = "{}"
    UTF8_PARSER = "{}"
    ARGUMENTS = "{}"
    TRY_FROM_INT = "{}"
    ABI = "{}"
    LINE_EDIT = "{}"
    VIRTIO = "{}"
    MMIO = "{}"

    @property
    def needs_detail(self) -> bool:
        return "{}" in self.template


class KernelError(Exception):
    """An error raised inside the kernel.

    ``detail`` fills in the kind's template; it is required for kinds whose
    message includes a value and must be left out otherwise. When the detail
    is itself an exception it becomes the cause of this one.
    """

    def __init__(self, kind: ErrorKind, detail: Any = None) -> None:
        if kind.needs_detail and detail is None:
            raise ValueError(f"{kind.name} needs a detail")
        if not kind.needs_detail and detail is not None:
            raise ValueError(f"{kind.name} takes no detail")
        self.kind = kind
        self.detail = detail
        super().__init__(self.__str__())
        if isinstance(detail, BaseException):
            self.__cause__ = detail

    def __str__(self) -> str:
        if self.kind.needs_detail:
            return self.kind.template.format(self.detail)
        return self.kind.template

    def __int__(self) -> int:
        """The exit code reported for any kernel error."""
        return 1