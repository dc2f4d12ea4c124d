"""Xtensa relocation of a single instruction or data word in memory."""

from __future__ import annotations

from .elf_dynamic import XtensaRelocation
from .memory import AddressSpace

_U32 = 0xFFFFFFFF
UNDEFINED_ADDRESS = 0xFFFFFFFF

_TYPE_NAMES = {
    XtensaRelocation.NONE: "R_XTENSA_NONE",
    XtensaRelocation.R32: "R_XTENSA_32",
    XtensaRelocation.ASM_EXPAND: "R_XTENSA_ASM_EXPAND",
    XtensaRelocation.SLOT0_OP: "R_XTENSA_SLOT0_OP",
}


class RelocationError(ValueError):
    """Raised when a relocation cannot be applied.

    ``original`` and ``patched`` hold the word at the relocation address
    before and after the attempt, where the attempt got that far.
    """

    def __init__(self, message: str, original: int | None = None, patched: int | None = None) -> None:
        super().__init__(message)
        self.original = original
        self.patched = patched


def type_name(rtype: int) -> str:
    """Return the symbolic name of a supported Xtensa relocation type."""
    return _TYPE_NAMES.get(rtype, "R_<unknow>")


def _s32(value: int) -> int:
    value &= _U32
    return value - (1 << 32) if value & 0x80000000 else value


def _store_bytes(memory: AddressSpace, address: int, value: int, count: int) -> None:
    for n in range(count):
        memory.set8(address + n, (value >> (8 * n)) & 0xFF)


def _relocate_slot0(memory: AddressSpace, rel_addr: int, sym_addr: int) -> tuple[int, int]:
    v = memory.get32(rel_addr)

    # L32R
    if v & 0x0F == 0x01:
        delta = _s32(sym_addr - ((rel_addr + 3) & 0xFFFFFFFC))
        if delta & 0x3:
            raise RelocationError("L32R error", original=v)
        _store_bytes(memory, rel_addr + 1, delta >> 2, 2)
        return v, memory.get32(rel_addr)

    # CALL0, CALL4, CALL8, CALL12
    if v & 0x0F == 0x05:
        delta = _s32(sym_addr - ((rel_addr + 4) & 0xFFFFFFFC))
        if delta & 0x3:
            raise RelocationError("CALL error", original=v)
        delta = _s32((delta >> 2) << 6) | memory.get8(rel_addr)
        _store_bytes(memory, rel_addr, delta, 3)
        return v, memory.get32(rel_addr)

    # J
    if v & 0x3F == 0x06:
        delta = _s32(sym_addr - (rel_addr + 4))
        delta = _s32(delta << 6) | memory.get8(rel_addr)
        _store_bytes(memory, rel_addr, delta, 3)
        return v, memory.get32(rel_addr)

    # BRI8 branches and loops
    if v & 0x0F == 0x07 or v & 0x3F == 0x26 or (v & 0x3F == 0x36 and v & 0xFF != 0x36):
        delta = _s32(sym_addr - (rel_addr + 4))
        memory.set8(rel_addr + 2, delta & 0xFF)
        patched = memory.get32(rel_addr)
        if delta < -(1 << 7) or delta >= (1 << 7):
            raise RelocationError("BRI8 out of range", original=v, patched=patched)
        return v, patched

    # BRI12: BEQZ, BGEZ, BLTZ, BNEZ
    if v & 0x3F == 0x16:
        delta = _s32(sym_addr - (rel_addr + 4))
        # Only the two bytes written back matter, so only they are merged in.
        existing = memory.get8(rel_addr + 1) | (memory.get8(rel_addr + 2) << 8)
        field = _s32(delta << 4) | existing
        _store_bytes(memory, rel_addr + 1, field, 2)
        patched = memory.get32(rel_addr)
        if delta < -(1 << 11) or delta >= (1 << 11):
            raise RelocationError("BRI12 out of range", original=v, patched=patched)
        return v, patched

    # RI6: BEQZ.N, BNEZ.N
    if v & 0x8F == 0x8C:
        delta = _s32(sym_addr - (rel_addr + 4))
        high = (delta & 0x30) | memory.get8(rel_addr)
        low = ((delta << 4) & 0xF0) | memory.get8(rel_addr + 1)
        memory.set8(rel_addr, high & 0xFF)
        memory.set8(rel_addr + 1, low & 0xFF)
        patched = memory.get32(rel_addr)
        if delta < 0 or delta > 0x111111:
            raise RelocationError("RI6 out of range", original=v, patched=patched)
        return v, patched

    raise RelocationError(f"unknown opcode {v:08X}", original=v, patched=0)


def relocate_symbol(
    memory: AddressSpace, rel_addr: int, rtype: int, sym_addr: int, def_addr: int
) -> tuple[int, int]:
    """Apply one relocation at ``rel_addr`` and return the word before and after.

    ``sym_addr`` of 0xFFFFFFFF means the symbol was not resolved; ``def_addr``
    is then used in its place unless it is zero.
    """
    rel_addr &= _U32
    sym_addr &= _U32
    if sym_addr == UNDEFINED_ADDRESS:
        if def_addr == 0:
            raise RelocationError("undefined symAddr")
        sym_addr = def_addr & _U32

    if rtype == XtensaRelocation.R32:
        original = memory.get32(rel_addr)
        patched = (sym_addr + original) & _U32
        memory.set32(rel_addr, patched)
        return original, patched
    if rtype == XtensaRelocation.SLOT0_OP:
        return _relocate_slot0(memory, rel_addr, sym_addr)
    if rtype == XtensaRelocation.ASM_EXPAND:
        word = memory.get32(rel_addr)
        return word, memory.get32(rel_addr)
    raise RelocationError(f"undefined relocation {rtype} {type_name(rtype)}")