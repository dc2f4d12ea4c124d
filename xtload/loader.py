"""Loading of relocatable Xtensa ELF modules into an address space: sections
are copied into heap memory, relocations are applied against the module's own
sections and a table of exported host symbols, and functions are looked up by
name."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import TypeVar, Union

from .elf_constants import SectionFlag, SectionType, r_sym, r_type
from .elf_dynamic import XtensaRelocation
from .elf_types import ElfFormatError, ElfHeader, Rela, SectionHeader, Symbol
from .memory import AddressSpace, MemoryAccessError
from .relocation import UNDEFINED_ADDRESS, RelocationError, relocate_symbol, type_name

_log = logging.getLogger(__name__)

_U32 = 0xFFFFFFFF
_NAME_LEN = 33
_SHDR_SIZE = SectionHeader.size()
_SYM_SIZE = Symbol.size()
_RELA_SIZE = Rela.size()

_T = TypeVar("_T")


class LoaderError(Exception):
    """Raised when a module cannot be loaded, relocated or searched."""


@dataclass(frozen=True)
class ExportedSymbol:
    """A host symbol that module relocations may refer to by name."""

    name: str
    address: int


@dataclass
class LoadedSection:
    """A section copied into memory.

    ``exec_address`` is the instruction-bus alias of an executable section and
    0 for a data section. ``rel_index`` is the index of the relocation section
    that applies to it, or 0 when there is none.
    """

    index: int
    heap: int
    exec_address: int
    size: int
    rel_index: int = 0


ExportsArg = Union[
    Mapping[str, int],
    Iterable[Union[ExportedSymbol, "tuple[str, int]"]],
    None,
]


def _normalise_exports(exports: ExportsArg) -> tuple[ExportedSymbol, ...]:
    if exports is None:
        return ()
    if isinstance(exports, Mapping):
        return tuple(ExportedSymbol(name, address) for name, address in exports.items())
    result = []
    for item in exports:
        if isinstance(item, ExportedSymbol):
            result.append(item)
        else:
            name, address = item
            result.append(ExportedSymbol(name, address))
    return tuple(result)


class _ElfImage:
    """Read access to the raw bytes of a 32-bit little-endian ELF image."""

    def __init__(self, image: bytes | bytearray | memoryview) -> None:
        self.data = bytes(image)
        self.shoff = 0
        self.shstrtab_offset = 0
        self.symtab_offset = 0
        self.symtab_count = 0
        self.strtab_offset = 0

    def parse(self, record: type[_T], offset: int) -> _T:
        try:
            return record.parse(self.data, offset)  # type: ignore[attr-defined]
        except ElfFormatError as exc:
            raise LoaderError(f"truncated image: {exc}") from exc

    def read(self, offset: int, size: int) -> bytes:
        if offset < 0 or offset + size > len(self.data):
            raise LoaderError(
                f"truncated image: {size} bytes at offset {offset} exceed {len(self.data)}"
            )
        return self.data[offset:offset + size]

    def name_at(self, offset: int) -> str:
        chunk = self.data[offset:offset + _NAME_LEN] if offset >= 0 else b""
        return chunk.split(b"\0", 1)[0].decode("latin-1")

    def section(self, index: int, default: str = "<unamed>") -> tuple[SectionHeader, str]:
        header = self.parse(SectionHeader, self.shoff + index * _SHDR_SIZE)
        name = default
        if header.name:
            name = self.name_at(self.shstrtab_offset + header.name)
        return header, name

    def symbol(self, index: int) -> tuple[Symbol, str]:
        sym = self.parse(Symbol, self.symtab_offset + index * _SYM_SIZE)
        if sym.name:
            return sym, self.name_at(self.strtab_offset + sym.name)
        try:
            _, name = self.section(sym.shndx, "<unnamed>")
        except LoaderError:
            name = "<unnamed>"
        return sym, name


class ElfModule:
    """A module loaded and relocated into an address space.

    Sections are kept most recently loaded first. Use :func:`load_module` to
    create one; call :meth:`free` or use it as a context manager to release
    its memory.
    """

    def __init__(
        self,
        memory: AddressSpace,
        elf: _ElfImage,
        exports: tuple[ExportedSymbol, ...],
    ) -> None:
        self.memory = memory
        self.exports = exports
        self.sections: list[LoadedSection] = []
        self._elf = elf
        self._text: int | None = None
        self._closed = False

    # Loading

    def _find_section(self, index: int) -> LoadedSection | None:
        return next((s for s in self.sections if s.index == index), None)

    def _load_sections(self, count: int) -> None:
        elf = self._elf
        for n in range(1, count):
            header, name = elf.section(n)
            if header.flags & SectionFlag.ALLOC:
                if not header.size:
                    _log.info("  section %2d: %-15s no data", n, name)
                    continue
                try:
                    if header.flags & SectionFlag.EXECINSTR:
                        heap, exec_address = self.memory.allocate_text(header.size)
                    else:
                        heap, exec_address = self.memory.allocate_data(header.size), 0
                except MemoryError as exc:
                    raise LoaderError(f"section allocation failed: {name}") from exc
                section = LoadedSection(n, heap, exec_address, header.size)
                self.sections.insert(0, section)
                if header.type != SectionType.NOBITS:
                    self.memory.write(heap, elf.read(header.offset, header.size))
                if name == ".text":
                    self._text = heap
                _log.info("  section %2d: %-15s %08X %6d", n, name, heap, header.size)
            elif header.type == SectionType.RELA:
                if header.info >= n:
                    raise LoaderError(
                        f"rela section: bad linked section ({n}:{name} -> {header.info})"
                    )
                target = self._find_section(header.info)
                if target is None:
                    _log.info("  section %2d: %-15s -> %2d: ignoring", n, name, header.info)
                else:
                    target.rel_index = n
                    _log.info("  section %2d: %-15s -> %2d: ok", n, name, header.info)
            else:
                _log.info("  section %2d: %s", n, name)
                if name == ".symtab":
                    elf.symtab_offset = header.offset
                    elf.symtab_count = header.size // _SYM_SIZE
                elif name == ".strtab":
                    elf.strtab_offset = header.offset
        if elf.symtab_offset == 0:
            raise LoaderError("missing .symtab or .strtab section")

    def _symbol_address(self, sym: Symbol, name: str, executable: bool) -> int:
        for export in self.exports:
            if export.name == name:
                return export.address & _U32
        section = self._find_section(sym.shndx)
        if section is not None:
            base = section.exec_address if executable else section.heap
            return (base + sym.value) & _U32
        return UNDEFINED_ADDRESS

    def _relocate_section(self, section: LoadedSection) -> list[str]:
        elf = self._elf
        rel_header, name = elf.section(section.rel_index)
        if not section.rel_index:
            _log.info("  Section %s: no relocation index", name)
            return []
        _log.info("  Section %s", name)
        errors: list[str] = []
        for count in range(rel_header.size // _RELA_SIZE):
            rela = elf.parse(Rela, rel_header.offset + count * _RELA_SIZE)
            sym_index = r_sym(rela.info)
            rtype = r_type(rela.info)
            rel_addr = (section.heap + rela.offset) & _U32
            sym, sym_name = elf.symbol(sym_index)
            sym_addr = (self._symbol_address(sym, sym_name, False) + rela.addend) & _U32
            if rtype in (XtensaRelocation.NONE, XtensaRelocation.ASM_EXPAND):
                continue
            if sym_addr == UNDEFINED_ADDRESS and sym.value == 0:
                message = f"undefined symbol {sym_name}"
                _log.error("Relocation - %s", message)
                errors.append(message)
                continue
            try:
                original, patched = relocate_symbol(
                    self.memory, rel_addr, rtype, sym_addr, sym.value
                )
            except (RelocationError, MemoryAccessError) as exc:
                message = (
                    f"{type_name(rtype)} at {rel_addr:08X} for {sym_name} "
                    f"+ {rela.addend:X}: {exc}"
                )
                _log.error("Relocation: %s", message)
                errors.append(message)
                continue
            _log.info(
                "  %08X %04X %04X %-20s %08X %08X %08X %08X->%08X %s + %X",
                rela.offset, sym_index, rtype, type_name(rtype), rel_addr, sym_addr,
                sym.value, original, patched, sym_name, rela.addend,
            )
        return errors

    def _relocate(self) -> None:
        _log.info("Relocating sections")
        errors: list[str] = []
        for section in self.sections:
            errors.extend(self._relocate_section(section))
        if errors:
            raise LoaderError("relocation failed: " + "; ".join(errors))

    # Public interface

    def get_function(self, name: str) -> int:
        """Return the executable address of the symbol called ``name``."""
        if self._closed:
            raise LoaderError("module has been freed")
        found = 0
        for index in range(self._elf.symtab_count):
            sym, sym_name = self._elf.symbol(index)
            if sym_name != name:
                continue
            address = self._symbol_address(sym, sym_name, True)
            if address != UNDEFINED_ADDRESS:
                found = address
        if not found:
            raise LoaderError(f"function symbol not found: {name}")
        return found

    def text_address(self) -> int | None:
        """Heap address of the loaded .text section, or None without one."""
        return self._text

    def free(self) -> None:
        """Release the memory of every loaded section."""
        for section in self.sections:
            self.memory.free(section.heap)
        self.sections.clear()
        self._text = None
        self._closed = True

    def __enter__(self) -> ElfModule:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.free()


def load_module(
    image: bytes | bytearray | memoryview,
    exports: ExportsArg = None,
    memory: AddressSpace | None = None,
) -> ElfModule:
    """Load and relocate a 32-bit ELF object ``image`` into ``memory``.

    ``exports`` maps host symbol names to addresses; they take precedence over
    the module's own symbols. On failure every allocation is released and
    :class:`LoaderError` is raised.
    """
    export_table = _normalise_exports(exports)
    for export in export_table:
        _log.info("  %08X %s", export.address & _U32, export.name)
    memory = memory if memory is not None else AddressSpace()
    elf = _ElfImage(image)

    header = elf.parse(ElfHeader, 0)
    if not header.has_magic:
        raise LoaderError("bad ELF identification")
    shstrtab = elf.parse(SectionHeader, header.shoff + header.shstrndx * _SHDR_SIZE)
    elf.shoff = header.shoff
    elf.shstrtab_offset = shstrtab.offset

    module = ElfModule(memory, elf, export_table)
    try:
        _log.info("Scanning ELF sections")
        module._load_sections(header.shnum)
        module._relocate()
    except BaseException:
        module.free()
        raise
    return module