"""Build userspace programs, flatten their ELF images and emit them as modules."""

from __future__ import annotations

import argparse
import os
import struct
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

USERSPACE_DIR = "./src/userspace"
LINKER_SCRIPT = "./linker.ld"
DEFAULT_CRATE_DIR = "../userspace"

_PROGBITS = 0x1
_NOBITS = 0x8

_HEADER_FORMATS = {1: "<HHIIIIIHHHHHH", 2: "<HHIQQQIHHHHHH"}
_SECTION_FORMATS = {1: "<IIIIIIIIII", 2: "<IIQQQQIIQQ"}


@dataclass(frozen=True)
class _Section:
    name_offset: int
    type: int
    addr: int
    offset: int
    size: int


def _parse_sections(image: bytes) -> tuple[int, list[_Section], int]:
    if len(image) < 16 or image[:4] != b"\x7fELF":
        raise ValueError("not an ELF file")
    elf_class, data_encoding = image[4], image[5]
    if elf_class not in _HEADER_FORMATS:
        raise ValueError(f"unsupported ELF class: {elf_class}")
    if data_encoding != 1:
        raise ValueError("not a little-endian ELF file")

    header_format = _HEADER_FORMATS[elf_class]
    try:
        (_, _, _, entry, _, shoff, _, _, _, _, shentsize, shnum, shstrndx) = (
            struct.unpack_from(header_format, image, 16)
        )
    except struct.error as exc:
        raise ValueError("truncated ELF header") from exc

    section_format = _SECTION_FORMATS[elf_class]
    if shnum and shentsize < struct.calcsize(section_format):
        raise ValueError(f"invalid section header size: {shentsize}")
    sections = []
    for number in range(shnum):
        try:
            fields = struct.unpack_from(section_format, image, shoff + number * shentsize)
        except struct.error as exc:
            raise ValueError("truncated section header table") from exc
        name, sh_type, _, addr, offset, size = fields[:6]
        sections.append(_Section(name, sh_type, addr, offset, size))
    return entry, sections, shstrndx


def _section_data(image: bytes, section: _Section) -> bytes:
    if section.type == _NOBITS:
        return b""
    end = section.offset + section.size
    if end > len(image):
        raise ValueError("section data extends past end of file")
    return image[section.offset : end]


def _section_name(strtab: bytes, offset: int) -> str:
    if offset >= len(strtab):
        raise ValueError(f"section name offset out of range: {offset}")
    end = strtab.find(b"\0", offset)
    if end == -1:
        raise ValueError("unterminated section name")
    return strtab[offset:end].decode("utf-8")


def objcopy(path: str | os.PathLike[str]) -> tuple[int, bytes]:
    """Flatten the loadable sections of an ELF file into one image.

    Returns the entry point as an offset into the image, and the image.
    """
    image = Path(path).read_bytes()
    entry, sections, shstrndx = _parse_sections(image)
    if shstrndx == 0 or shstrndx >= len(sections):
        raise ValueError("ELF file has no section name table")
    strtab = _section_data(image, sections[shstrndx])

    start: int | None = None
    flat = bytearray()
    for section in sections:
        if section.type not in (_PROGBITS, _NOBITS):
            continue
        name = _section_name(strtab, section.name_offset)
        if name.startswith(".debug") or name.startswith(".comment"):
            continue

        if start is None:
            start = section.addr
        addr = section.addr - start
        if addr < 0:
            raise ValueError(f"section {name} lies before the first section")

        data = _section_data(image, section)
        if len(flat) < addr:
            flat.extend(bytes(addr - len(flat)))
        if len(flat) > addr:
            raise ValueError("Outside of section!")
        flat.extend(data)
        if section.size > len(data):
            flat.extend(bytes(section.size - len(data)))

    if start is None:
        raise ValueError("ELF file has no loadable sections")
    if entry < start:
        raise ValueError("entry point lies before the first section")
    return entry - start, bytes(flat)


def render_binary_module(entry: int, data: bytes) -> str:
    """Render an entry offset and image as the text of a generated module."""
    body = "".join(f"0x{byte:02x}," for byte in data)
    return f"# @generated\nENTRY_OFFSET = 0x{entry:08x}\nBIN = bytes((\n{body}\n))\n"


def build_crate(
    crate: str,
    userspace_dir: str | os.PathLike[str] = DEFAULT_CRATE_DIR,
    target: str | None = None,
    profile: str | None = None,
) -> Path:
    """Build a userspace crate with cargo and return the path of its binary.

    ``target`` and ``profile`` default to the TARGET and PROFILE environment
    variables.
    """
    target = target if target is not None else os.environ.get("TARGET")
    profile = profile if profile is not None else os.environ.get("PROFILE")
    if target is None:
        raise RuntimeError("no target given and TARGET is not set")
    if profile is None:
        raise RuntimeError("no profile given and PROFILE is not set")
    profile_arg = "dev" if profile == "debug" else profile

    crate_dir = Path(userspace_dir) / crate
    result = subprocess.run(
        ["cargo", "build", "--profile", profile_arg], cwd=crate_dir, check=False
    )
    if result.returncode != 0:
        raise RuntimeError("`cargo build` did not exit successfully")
    return crate_dir / ".." / "target" / target / profile / crate


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build userspace programs and embed them as generated modules."
    )
    parser.add_argument("crates", nargs="*", help="crates to build")
    parser.add_argument("--test", action="store_true", help="also build test programs")
    parser.add_argument("--userspace-dir", default=DEFAULT_CRATE_DIR)
    parser.add_argument("--output-dir", default=USERSPACE_DIR)
    parser.add_argument("--linker-script", default=LINKER_SCRIPT)
    parser.add_argument("--target", default=None)
    parser.add_argument("--profile", default=None)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Build each userspace program and write its flattened image module."""
    args = _parse_args(argv)
    print("cargo:rustc-link-arg=-T")
    print(f"cargo:rustc-link-arg={args.linker_script}")
    print(f"cargo:rerun-if-changed={args.linker_script}")

    crates = args.crates or (["dratinit", "gary"] if args.test else ["dratinit"])
    output_dir = Path(args.output_dir)
    try:
        for crate in crates:
            binary = build_crate(crate, args.userspace_dir, args.target, args.profile)
            entry, data = objcopy(binary)
            (output_dir / f"{crate}.py").write_text(render_binary_module(entry, data))
    except (OSError, RuntimeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())