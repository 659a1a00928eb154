import pytest

from kabut.cpu import HartId, InterruptId, Register
from kabut.errors import ErrorKind, KernelError


def test_hart_zero():
    hart = HartId.zero()
    assert hart.is_zero()
    assert int(hart) == 0
    assert str(hart) == "0"


def test_hart_nonzero():
    hart = HartId(3)
    assert not hart.is_zero()
    assert int(hart) == 3
    assert hart == HartId(3)


def test_hart_negative_rejected():
    with pytest.raises(ValueError):
        HartId(-1)


def test_interrupt_id_round_trip():
    iid = InterruptId.from_int(10)
    assert int(iid) == 10
    assert str(iid) == "10"


def test_interrupt_id_ordering():
    assert InterruptId.from_int(1) < InterruptId.from_int(2)


def test_interrupt_id_zero_rejected():
    with pytest.raises(KernelError) as info:
        InterruptId.from_int(0)
    assert info.value.kind is ErrorKind.INVALID_INT_ID
    assert str(info.value) == "Invalid interruptId: 0"


def test_interrupt_id_too_large_rejected():
    with pytest.raises(KernelError) as info:
        InterruptId.from_int(1 << 32)
    assert info.value.kind is ErrorKind.TRY_FROM_INT


def test_interrupt_id_max():
    assert int(InterruptId.from_int(0xFFFFFFFF)) == 0xFFFFFFFF


def test_register_names():
    assert Register.RETURN_ADDRESS.as_str() == "ra"
    assert Register.STACK_POINTER.as_str() == "sp"
    assert Register.GLOBAL_POINTER.as_str() == "gp"
    assert str(Register.ARG0) == "a0"
    assert str(Register.ARG7) == "a7"


@pytest.mark.parametrize("number, name", [(1, "ra"), (2, "sp"), (3, "gp")])
def test_register_numbers_for_special_registers(number, name):
    assert Register(number).as_str() == name


@pytest.mark.parametrize("n", range(8))
def test_register_numbers_for_arguments(n):
    assert str(Register(10 + n)) == f"a{n}"


def test_every_register_has_distinct_name():
    names = {str(Register(number)) for number in (1, 2, 3, *range(10, 18))}
    assert names == {"ra", "sp", "gp", "a0", "a1", "a2", "a3", "a4", "a5", "a6", "a7"}