import random

import pytest

from kabut.buffers import FixedBuffer, GrowableBuffer, HistoryRing, LineEditError
from kabut.line_edit import LineEditState


def fixed(size=256):
    return LineEditState(FixedBuffer(size))


def test_doc_example():
    state = fixed()
    state.insert_many("Hello Worlf!")
    state.shift_left(1)
    state.delete_prev()
    state.insert("d")
    state.shift_right(1)
    assert state.as_str() == "Hello World!"


def test_basic_insert():
    state = fixed()
    state.insert_many("Hello world")
    state.insert("!")
    assert state.as_str() == "Hello world!"


def test_shifting():
    state = fixed()
    state.insert_many("Hi!")
    assert state.shift_left(1) == 1
    assert state.as_str() == "Hi!"
    state.insert_many(" there")
    assert state.as_str() == "Hi there!"
    assert state.shift_right(1) == 1
    assert state.delete_prev() == "!"
    assert state.as_str() == "Hi there"
    assert state.shift_left(1) == 1
    assert state.delete_prev() == "r"
    assert state.as_str() == "Hi thee"


def test_basic_delete():
    state = fixed()
    state.insert_many("Hi")
    assert state.as_str() == "Hi"
    assert state.delete_prev() == "i"
    assert state.as_str() == "H"
    assert state.delete_prev() == "H"
    assert state.as_str() == ""
    assert state.delete_prev() is None


def test_check_oom_and_clear():
    state = fixed(4)
    assert state.insert_many("Hello world") == 4
    assert not state.insert("!")
    assert state.as_str() == "Hell"
    state.clear()
    assert state.insert_many("123") == 3
    assert state.insert("4")
    assert not state.insert("5")
    assert state.as_str() == "1234"


def test_allocate_memory():
    state = LineEditState(GrowableBuffer(2))
    state.insert_many("Hello🌈world!")
    assert state.as_str() == "Hello🌈world!"
    assert len(state) == 15


def test_move_past_next_word():
    state = fixed()
    state.insert_many("The quick    brown\tfax    ")
    state.move_to_start()
    assert state.head() == ""
    state.move_past_end_of_word()
    assert state.head() == "The"
    state.move_past_end_of_word()
    assert state.head() == "The quick"
    state.move_past_end_of_word()
    assert state.head() == "The quick    brown"
    state.move_past_end_of_word()
    assert state.head() == "The quick    brown\tfax"
    state.move_past_end_of_word()
    assert state.head() == "The quick    brown\tfax    "
    state.move_past_end_of_word()
    assert state.head() == "The quick    brown\tfax    "
    state.move_to_prev_start_of_word()
    assert state.head() == "The quick    brown\t"
    state.move_to_prev_start_of_word()
    assert state.head() == "The quick    "
    state.move_to_prev_start_of_word()
    assert state.head() == "The "
    state.move_to_prev_start_of_word()
    assert state.head() == ""
    state.move_to_prev_start_of_word()
    assert state.head() == ""


def test_basic_killing():
    state = fixed()
    state.insert_many("The quick 🦊 jamped ")
    assert state.kill_prev_word() == "jamped "
    assert state.kill_prev_word() == "🦊 "
    assert state.kill_prev_word() == "quick "
    assert state.kill_prev_word() == "The "
    assert state.kill_prev_word() == ""


def test_kill_to_end():
    state = fixed()
    state.insert_many("Hello World!")
    assert state.kill_to_end() == ""
    assert state.as_str() == "Hello World!"

    state.move_to_prev_start_of_word()
    assert state.kill_to_end() == "World!"
    assert state.as_str() == "Hello "

    state.move_to_prev_start_of_word()
    assert state.kill_to_end() == "Hello "
    assert state.as_str() == ""

    assert state.kill_to_end() == ""
    assert state.as_str() == ""


def test_transpose_chars():
    state = fixed()
    state.insert_many("🐌Hello")
    state.move_to_start()

    state.transpose_chars()
    assert state.as_str() == "🐌Hello"

    state.shift_right(1)
    expected = ["H🐌ello", "He🐌llo", "Hel🐌lo", "Hell🐌o", "Hello🐌", "Hell🐌o", "Hello🐌"]
    for text in expected:
        state.transpose_chars()
        assert state.as_str() == text


def _random_char(rng):
    while True:
        cp = rng.randrange(0x110000)
        if not 0xD800 <= cp <= 0xDFFF:
            return chr(cp)


@pytest.mark.parametrize("seed", range(4))
def test_fuzz(seed):
    rng = random.Random(seed)
    buffer = GrowableBuffer(rng.randrange(256) + 1)
    if rng.random() < 0.5:
        buffer.data[:] = bytes(rng.randrange(256) for _ in range(len(buffer.data)))
    state = LineEditState(buffer)

    for _ in range(2000):
        if rng.random() < 0.5:
            state.insert(_random_char(rng))
        if rng.random() < 0.5:
            state.shift_left(rng.randrange(1000))
        if rng.random() < 0.5:
            state.shift_right(rng.randrange(1000))
        if rng.random() < 0.5:
            state.delete_prev()
        if rng.random() < 0.5:
            state.delete_current()
        whole = state.as_str()
        assert state.head() + state.tail() == whole
        assert len(whole.encode("utf-8")) == len(state)


def test_line_edit_with_history():
    state = LineEditState(HistoryRing(4, 3))

    assert state.as_str() == ""
    state.insert_many("One")
    assert state.as_str() == "One"
    assert state.next_history_entry() is None
    assert state.prev_history_entry() is None

    state.new_history_entry()
    assert state.as_str() == ""
    state.insert_many("Two")
    assert state.as_str() == "Two"
    assert state.next_history_entry() is None
    assert state.prev_history_entry() is not None
    assert state.prev_history_entry() is None
    assert state.as_str() == "One"
    assert state.next_history_entry() is not None
    assert state.as_str() == "Two"
    assert state.next_history_entry() is None
    assert state.as_str() == "Two"

    state.new_history_entry()
    state.insert_many("Three")
    assert state.as_str() == "Thre"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "Two"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "One"
    assert state.next_history_entry() is not None
    assert state.next_history_entry() is not None

    state.new_history_entry()
    state.insert_many("Four")
    assert state.as_str() == "Four"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "Thre"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "Two"
    assert state.prev_history_entry() is None

    state.new_history_entry()
    state.insert_many("Five")
    assert state.as_str() == "Five"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "Four"
    assert state.prev_history_entry() is not None
    assert state.as_str() == "Thre"
    assert state.prev_history_entry() is None


def test_zero_sized_buffer_rejected():
    with pytest.raises(ValueError):
        LineEditState(FixedBuffer(0))


def test_history_requires_history_buffer():
    state = fixed()
    with pytest.raises(TypeError):
        state.new_history_entry()


def test_invalid_utf8_raises():
    buffer = FixedBuffer(8)
    state = LineEditState(buffer)
    state.insert_many("ab")
    buffer.data[0] = 0xFF
    with pytest.raises(LineEditError):
        state.as_str()


def test_is_empty_and_len():
    state = fixed()
    assert state.is_empty()
    state.insert("é")
    assert not state.is_empty()
    assert len(state) == 2
    state.move_to_start()
    assert state.head() == ""
    state.move_to_end()
    assert state.head() == "é"


def test_insert_requires_single_character():
    state = fixed()
    with pytest.raises(ValueError):
        state.insert("ab")