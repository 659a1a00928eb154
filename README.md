# kabut

Building blocks for the console and userspace interface of a small
RISC-V operating system:

- **Line editing** (`kabut.buffers`, `kabut.line_edit`): a UTF-8 aware
  line editor core working on a byte buffer of fixed or growable size,
  or on a ring of history buffers.
- **Readline** (`kabut.readline`): a GNU Readline-like prompt built on
  the line editor, driven by an iterable of characters and a text writer.
- **ABI and kernel types** (`kabut.abi`, `kabut.cpu`, `kabut.errors`):
  process IDs, file descriptors, syscall numbers, hart and interrupt IDs,
  RISC-V register names and the kernel error type.
- **objcopy** (`kabut.objcopy`): flattens the loadable sections of an
  ELF file and renders them as a generated Python module; the
  `kabut-objcopy` command builds userspace programs with cargo and does
  this for each.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

## Line editing

```python
from kabut.buffers import FixedBuffer
from kabut.line_edit import LineEditState

state = LineEditState(FixedBuffer(256))
state.insert_many("Hello Worlf!")
state.shift_left(1)
state.delete_prev()
state.insert("d")
state.shift_right(1)
assert state.as_str() == "Hello World!"
```

`LineEditState` takes one of three buffers:

- `FixedBuffer(size)` never grows: `insert` returns `False` once the
  next character does not fit, and `insert_many` stops there, returning
  how many characters went in.
- `GrowableBuffer(size)` grows by as many bytes as an insertion needs.
- `HistoryRing(size, capacity)` holds at most `capacity` fixed-size
  lines, the one being edited included; the oldest is dropped when the
  ring is full. Only with this buffer can `new_history_entry()`,
  `prev_history_entry()` and `next_history_entry()` be used (other
  buffers raise `TypeError`). The last two return the size in bytes of
  the line switched to, or `None` when there is none.

`as_str()`, `head()` and `tail()` give the whole line, the part before
the insertion point and the part after it; `len(state)` is the length
in bytes. Editing follows GNU Readline: `move_to_prev_start_of_word`
(Alt-b), `move_past_end_of_word` (Alt-f), `kill_prev_word` (Ctrl-w) and
`kill_to_end` (Ctrl-k), which both return the removed text, and
`transpose_chars` (Ctrl-t). Malformed UTF-8 in the buffer raises
`kabut.buffers.LineEditError`.

## Reading a line

```python
import io
from kabut.readline import CrustyLine

readline = CrustyLine(64, 8)
out = io.StringIO()
line = readline.get_line("> ", iter("ls -l\r"), out)
assert line == "ls -l"
```

`CrustyLine(buffer_size, history_size)` (defaults 64 and 8) allows lines
of up to `buffer_size` bytes. `get_line` writes the prompt, echoes and
redraws as keys arrive, and returns the line on Enter (`\r`). Ctrl-c
cancels and returns an empty string. Backspace/Delete, Ctrl-a/b/d/e/f,
Ctrl-k, Ctrl-l (clear screen), Ctrl-t, Ctrl-w, the arrow keys (up and
down walk the history), Alt-b and Alt-f behave as in GNU Readline; other
control characters are ignored. A non-empty previous line is kept in the
history when the next call starts.

If the input runs out before Enter, `UnexpectedEndOfInput` is raised; if
the reader itself raises, `ReaderError` is raised. Both derive from
`CrustyLineError`.

## ABI and kernel types

```python
from kabut.abi import FileDescriptor, Pid, Syscall

pid = Pid.from_usize(42)
assert int(pid) == 42
assert Pid.maybe_from_usize(0) is None
fd = FileDescriptor.from_usize(3)
assert str(fd) == "3"
assert Syscall.PUT_CHAR == 1
```

`Pid` is a non-zero 16-bit number; `Pid.generate()` hands out fresh
PIDs counting up from 1. `FileDescriptor` is a 16-bit number.
Out-of-range values raise `InvalidPidError` or
`InvalidFileDescriptorError`, both subclasses of `KrabbyAbiError` (and
of `ValueError`). `ProcessError.FAILURE` is the exit code 1.

In `kabut.cpu`, `HartId` names a hardware thread (`HartId.zero()` is
the primary one), `InterruptId.from_int(value)` builds a non-zero 32-bit
interrupt ID and raises `KernelError` otherwise, and `Register` numbers
the RISC-V registers `ra`, `sp`, `gp` and `a0`–`a7`, with
`Register.ARG0.as_str() == "a0"`.

`kabut.errors.KernelError(kind, detail)` carries an `ErrorKind`; its
message is the kind's text, filled in with `detail` for kinds that take
one (`KernelError(ErrorKind.INVALID_PID, 7)` reads `Invalid PID: 7`).
`int(error)` is always 1.

## Extracting binaries from ELF files

`kabut.objcopy.objcopy(path)` reads a little-endian 32- or 64-bit ELF
file and returns the entry point as an offset into the image, and the
image: every PROGBITS and NOBITS section except `.debug*` and
`.comment*`, laid out from the first one's address, gaps and NOBITS
sections filled with zeros. `render_binary_module(entry, data)` turns
the two into the text of a module defining `ENTRY_OFFSET` and `BIN`.
Malformed files raise `ValueError`.

`build_crate(crate, userspace_dir, target, profile)` runs
`cargo build --profile ...` in `userspace_dir/crate` (a `debug` profile
is built as `dev`) and returns the path of the binary; `target` and
`profile` default to the `TARGET` and `PROFILE` environment variables.

The `kabut-objcopy` command prints the cargo linker-script lines, builds
the named crates (by default `dratinit`, plus `gary` with `--test`) and
writes `<crate>.py` into the output directory. Run

```
kabut-objcopy --help
```

for its options (`--userspace-dir`, `--output-dir`, `--linker-script`,
`--target`, `--profile`). It exits with status 1 and a message on
failure.

## What this package does not do

It is not an operating system. There is no kernel, no drivers, no
scheduler, no memory management, no filesystem and no kernel console
with commands; the types here only describe values such a kernel and its
programs exchange, and `CrustyLine` only reads lines. `Register` names
registers but cannot read their values.

## Running the tests

```
pip install .[test]
pytest
```