import pytest

from kabut.abi import InvalidPidError
from kabut.errors import ErrorKind, KernelError


def test_generic_message():
    err = KernelError(ErrorKind.GENERIC, "Command not found")
    assert str(err) == "Command not found"
    assert err.kind is ErrorKind.GENERIC


def test_fixed_messages():
    assert str(KernelError(ErrorKind.NULL_POINTER)) == "Attempted to dereference null pointer"
    assert str(KernelError(ErrorKind.CONVERSION)) == "Failed conversion"
    assert str(KernelError(ErrorKind.END_OF_INPUT)) == "Unexpected end of input"


def test_messages_with_values():
    assert str(KernelError(ErrorKind.INVALID_SYSCALL, 99)) == "Invalid syscall: 99"
    assert (
        str(KernelError(ErrorKind.MISSING_PROPERTY, "reg"))
        == "Missing FDT node property: reg"
    )
    assert str(KernelError(ErrorKind.INVALID_INT_ID, 0)) == "Invalid interruptId: 0"


def test_exit_code_is_one():
    assert int(KernelError(ErrorKind.FORBIDDEN_PAGE)) == 1
    assert int(KernelError(ErrorKind.GENERIC, "x")) == 1


def test_wrapped_error_displays_inner_and_is_cause():
    inner = InvalidPidError(0)
    err = KernelError(ErrorKind.ABI, inner)
    assert str(err) == str(inner)
    assert err.__cause__ is inner


def test_missing_detail_rejected():
    with pytest.raises(ValueError):
        KernelError(ErrorKind.NOT_MAPPED)


def test_unexpected_detail_rejected():
    with pytest.raises(ValueError):
        KernelError(ErrorKind.INVALID_ARGUMENTS, 3)


def test_raise_and_catch():
    err = KernelError(ErrorKind.DRIVER_FAILURE, "uart broke")
    assert str(err) == "uart broke"
    assert err.detail == "uart broke"
    with pytest.raises(KernelError) as info:
        raise err
    assert info.value.kind is ErrorKind.DRIVER_FAILURE


def test_kinds_distinct_even_with_same_template():
    generic = KernelError(ErrorKind.GENERIC, "same")
    driver = KernelError(ErrorKind.DRIVER_FAILURE, "same")
    assert str(generic) == str(driver) == "same"
    assert generic.kind is ErrorKind.GENERIC
    assert driver.kind is ErrorKind.DRIVER_FAILURE