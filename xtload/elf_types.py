"""Binary records of an ELF file: headers, symbols, relocations, segments,
dynamic entries and notes, for both 32-bit and 64-bit layouts."""

from __future__ import annotations

import struct
from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Any, ClassVar

from .elf_constants import (
    EI_CLASS,
    EI_DATA,
    EI_NIDENT,
    ELF_MAGIC,
    st_bind,
    st_type,
    st_visibility,
)

_FieldSpec = tuple[tuple[str, str], ...]

_BYTEORDERS = {"little": "<", "big": ">", 1: "<", 2: ">"}


class ElfFormatError(ValueError):
    """Raised when ELF data is truncated or a record cannot be encoded."""


def _prefix(byteorder: str | int) -> str:
    try:
        return _BYTEORDERS[byteorder]
    except (KeyError, TypeError):
        raise ValueError(f"unknown byte order: {byteorder!r}") from None


@lru_cache(maxsize=None)
def _layout(spec: _FieldSpec, prefix: str) -> tuple[struct.Struct, tuple[str, ...]]:
    codec = struct.Struct(prefix + "".join(code for _, code in spec))
    return codec, tuple(name for name, _ in spec)


def _spec(cls: type, wide: bool) -> _FieldSpec:
    return cls._SPEC64 if wide else cls._SPEC32


def _record_size(cls: type, wide: bool) -> int:
    return struct.calcsize("<" + "".join(code for _, code in _spec(cls, wide)))


def _parse(
    cls: type,
    data: bytes | bytearray | memoryview,
    offset: int,
    wide: bool,
    byteorder: str | int,
) -> Any:
    codec, names = _layout(_spec(cls, wide), _prefix(byteorder))
    if offset < 0 or offset + codec.size > len(data):
        raise ElfFormatError(
            f"{cls.__name__} at offset {offset} needs {codec.size} bytes, "
            f"data holds {len(data)}"
        )
    values = codec.unpack_from(data, offset)
    return cls(**dict(zip(names, values)))


def _pack(record: Any, wide: bool, byteorder: str | int) -> bytes:
    codec, names = _layout(_spec(type(record), wide), _prefix(byteorder))
    values = [getattr(record, name) for name in names]
    try:
        return codec.pack(*values)
    except struct.error as exc:
        raise ElfFormatError(f"cannot encode {type(record).__name__}: {exc}") from exc


def _fix_size_default(record: Any) -> None:
    # A record with a ``size`` field also has a ``size`` classmethod, which
    # the dataclass machinery picks up as the field default.
    if not isinstance(record.size, int):
        object.__setattr__(record, "size", 0)


@dataclass(frozen=True)
class ElfHeader:
    """The file header found at the start of every ELF file."""

    ident: bytes = bytes(EI_NIDENT)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (
        ("ident", "16s"), ("type", "H"), ("machine", "H"), ("version", "I"),
        ("entry", "I"), ("phoff", "I"), ("shoff", "I"), ("flags", "I"),
        ("ehsize", "H"), ("phentsize", "H"), ("phnum", "H"),
        ("shentsize", "H"), ("shnum", "H"), ("shstrndx", "H"),
    )
    _SPEC64: ClassVar[_FieldSpec] = (
        ("ident", "16s"), ("type", "H"), ("machine", "H"), ("version", "I"),
        ("entry", "Q"), ("phoff", "Q"), ("shoff", "Q"), ("flags", "I"),
        ("ehsize", "H"), ("phentsize", "H"), ("phnum", "H"),
        ("shentsize", "H"), ("shnum", "H"), ("shstrndx", "H"),
    )

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> ElfHeader:
        """Decode a file header starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the header; the identification must be exactly 16 bytes."""
        if len(self.ident) != EI_NIDENT:
            raise ElfFormatError(
                f"identification must be {EI_NIDENT} bytes, got {len(self.ident)}"
            )
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a file header in the chosen class."""
        return _record_size(cls, wide)

    @property
    def has_magic(self) -> bool:
        """Whether the identification starts with the ELF magic number."""
        return self.ident[: len(ELF_MAGIC)] == ELF_MAGIC

    @property
    def elf_class(self) -> int:
        """The file class byte of the identification."""
        return self.ident[EI_CLASS] if len(self.ident) > EI_CLASS else 0

    @property
    def data_encoding(self) -> int:
        """The data encoding byte of the identification."""
        return self.ident[EI_DATA] if len(self.ident) > EI_DATA else 0


@dataclass(frozen=True)
class SectionHeader:
    """An entry of the section header table."""

    name: int = 0
    type: int = 0
    flags: int = 0
    addr: int = 0
    offset: int = 0
    size: int = 0
    link: int = 0
    info: int = 0
    addralign: int = 0
    entsize: int = 0

    _SPEC32: ClassVar[_FieldSpec] = tuple(
        (n, "I") for n in (
            "name", "type", "flags", "addr", "offset",
            "size", "link", "info", "addralign", "entsize",
        )
    )
    _SPEC64: ClassVar[_FieldSpec] = (
        ("name", "I"), ("type", "I"), ("flags", "Q"), ("addr", "Q"),
        ("offset", "Q"), ("size", "Q"), ("link", "I"), ("info", "I"),
        ("addralign", "Q"), ("entsize", "Q"),
    )

    def __post_init__(self) -> None:
        _fix_size_default(self)

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> SectionHeader:
        """Decode a section header starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the section header in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:  # type: ignore[no-redef]
        """Size in bytes of a section header in the chosen class."""
        return _record_size(cls, wide)


@dataclass(frozen=True)
class Symbol:
    """An entry of a symbol table."""

    name: int = 0
    value: int = 0
    size: int = 0
    info: int = 0
    other: int = 0
    shndx: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (
        ("name", "I"), ("value", "I"), ("size", "I"),
        ("info", "B"), ("other", "B"), ("shndx", "H"),
    )
    _SPEC64: ClassVar[_FieldSpec] = (
        ("name", "I"), ("info", "B"), ("other", "B"), ("shndx", "H"),
        ("value", "Q"), ("size", "Q"),
    )

    def __post_init__(self) -> None:
        _fix_size_default(self)

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> Symbol:
        """Decode a symbol entry starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the symbol entry in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:  # type: ignore[no-redef]
        """Size in bytes of a symbol entry in the chosen class."""
        return _record_size(cls, wide)

    @property
    def binding(self) -> int:
        """The binding held in st_info."""
        return st_bind(self.info)

    @property
    def symbol_type(self) -> int:
        """The symbol type held in st_info."""
        return st_type(self.info)

    @property
    def visibility(self) -> int:
        """The visibility held in st_other."""
        return st_visibility(self.other)


@dataclass(frozen=True)
class Rel:
    """A relocation entry without addend."""

    offset: int = 0
    info: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (("offset", "I"), ("info", "I"))
    _SPEC64: ClassVar[_FieldSpec] = (("offset", "Q"), ("info", "Q"))

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> Rel:
        """Decode a relocation entry starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the relocation entry in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a relocation entry in the chosen class."""
        return _record_size(cls, wide)


@dataclass(frozen=True)
class Rela:
    """A relocation entry with a signed addend."""

    offset: int = 0
    info: int = 0
    addend: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (("offset", "I"), ("info", "I"), ("addend", "i"))
    _SPEC64: ClassVar[_FieldSpec] = (("offset", "Q"), ("info", "Q"), ("addend", "q"))

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> Rela:
        """Decode a relocation entry starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the relocation entry in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a relocation entry in the chosen class."""
        return _record_size(cls, wide)


@dataclass(frozen=True)
class ProgramHeader:
    """An entry of the program (segment) header table."""

    type: int = 0
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    _SPEC32: ClassVar[_FieldSpec] = tuple(
        (n, "I") for n in (
            "type", "offset", "vaddr", "paddr", "filesz", "memsz", "flags", "align",
        )
    )
    _SPEC64: ClassVar[_FieldSpec] = (
        ("type", "I"), ("flags", "I"), ("offset", "Q"), ("vaddr", "Q"),
        ("paddr", "Q"), ("filesz", "Q"), ("memsz", "Q"), ("align", "Q"),
    )

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> ProgramHeader:
        """Decode a program header starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the program header in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a program header in the chosen class."""
        return _record_size(cls, wide)


@dataclass(frozen=True)
class Dyn:
    """An entry of the dynamic section; ``value`` is d_val or d_ptr."""

    tag: int = 0
    value: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (("tag", "i"), ("value", "I"))
    _SPEC64: ClassVar[_FieldSpec] = (("tag", "q"), ("value", "Q"))

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> Dyn:
        """Decode a dynamic entry starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the dynamic entry in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a dynamic entry in the chosen class."""
        return _record_size(cls, wide)


@dataclass(frozen=True)
class NoteHeader:
    """The fixed header that starts every note entry."""

    namesz: int = 0
    descsz: int = 0
    type: int = 0

    _SPEC32: ClassVar[_FieldSpec] = (("namesz", "I"), ("descsz", "I"), ("type", "I"))
    _SPEC64: ClassVar[_FieldSpec] = _SPEC32

    @classmethod
    def parse(cls, data, offset=0, wide=False, byteorder="little") -> NoteHeader:
        """Decode a note header starting at ``offset`` in ``data``."""
        return _parse(cls, data, offset, wide, byteorder)

    def pack(self, wide=False, byteorder="little") -> bytes:
        """Encode the note header in the chosen class and byte order."""
        return _pack(self, wide, byteorder)

    @classmethod
    def size(cls, wide=False) -> int:
        """Size in bytes of a note header in the chosen class."""
        return _record_size(cls, wide)


def _check_specs() -> None:
    for record in (ElfHeader, SectionHeader, Symbol, Rel, Rela, ProgramHeader, Dyn, NoteHeader):
        names = {f.name for f in fields(record)}
        for spec in (record._SPEC32, record._SPEC64):
            if {n for n, _ in spec} != names:
                raise TypeError(f"field layout of {record.__name__} is inconsistent")


_check_specs()