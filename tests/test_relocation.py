import pytest

from xtload.elf_dynamic import XtensaRelocation
from xtload.memory import AddressSpace
from xtload.relocation import RelocationError, relocate_symbol, type_name


@pytest.fixture
def space():
    return AddressSpace()


@pytest.fixture
def rel(space):
    base = space.allocate_data(64)
    return base + 8


def _signed(value, bits):
    return value - (1 << bits) if value & (1 << (bits - 1)) else value


def test_type_names():
    assert type_name(XtensaRelocation.NONE) == "R_XTENSA_NONE"
    assert type_name(XtensaRelocation.R32) == "R_XTENSA_32"
    assert type_name(XtensaRelocation.ASM_EXPAND) == "R_XTENSA_ASM_EXPAND"
    assert type_name(XtensaRelocation.SLOT0_OP) == "R_XTENSA_SLOT0_OP"
    assert type_name(XtensaRelocation.DIFF32) == "R_<unknow>"


def test_r32_adds_symbol_to_word(space, rel):
    space.set32(rel, 0x10)
    original, patched = relocate_symbol(space, rel, XtensaRelocation.R32, 0x1000, 0)
    assert original == 0x10
    assert patched == space.get32(rel)
    assert patched - original == 0x1000


def test_undefined_symbol_uses_default(space, rel):
    space.set32(rel, 0)
    _, patched = relocate_symbol(space, rel, XtensaRelocation.R32, 0xFFFFFFFF, 0x4000)
    assert patched == 0x4000


def test_undefined_symbol_without_default_fails(space, rel):
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.R32, 0xFFFFFFFF, 0)


def test_asm_expand_leaves_word(space, rel):
    space.set32(rel, 0xDEADBEEF)
    result = relocate_symbol(space, rel, XtensaRelocation.ASM_EXPAND, 0x1234, 0)
    assert result == (0xDEADBEEF, 0xDEADBEEF)
    assert space.get32(rel) == 0xDEADBEEF


def test_unsupported_type_fails(space, rel):
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.RTLD, 0x1234, 0)


def test_l32r_encodes_word_offset(space, rel):
    space.set32(rel, 0x000001)
    target = rel - 0x40
    _, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, target, 0)
    offset = _signed((patched >> 8) & 0xFFFF, 16)
    assert ((rel + 3) & ~3) + offset * 4 == target
    assert patched & 0xFF == 0x01


def test_l32r_misaligned_target_fails(space, rel):
    space.set32(rel, 0x000001)
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel - 0x41, 0)


def test_call_encodes_target(space, rel):
    space.set32(rel, 0x000015)
    target = rel + 0x100
    _, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, target, 0)
    assert patched & 0x3F == 0x15
    offset = _signed((patched >> 6) & 0x3FFFF, 18)
    assert ((rel + 4) & ~3) + offset * 4 == target


def test_call_misaligned_target_fails(space, rel):
    space.set32(rel, 0x000005)
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel + 0x102, 0)


def test_jump_encodes_byte_offset(space, rel):
    space.set32(rel, 0x000006)
    target = rel - 0x20
    _, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, target, 0)
    assert patched & 0x3F == 0x06
    offset = _signed((patched >> 6) & 0x3FFFF, 18)
    assert rel + 4 + offset == target


def test_bri8_in_range(space, rel):
    space.set32(rel, 0x000007)
    target = rel + 4 + 0x30
    original, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, target, 0)
    assert original == 0x000007
    assert rel + 4 + _signed((patched >> 16) & 0xFF, 8) == target
    assert patched & 0xFFFF == 0x0007


def test_bri8_out_of_range_still_patches(space, rel):
    space.set32(rel, 0x000026)
    with pytest.raises(RelocationError) as info:
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel + 4 + 0x200, 0)
    assert info.value.original == 0x000026
    assert info.value.patched == space.get32(rel)


def test_bri12_in_range(space, rel):
    space.set32(rel, 0x000016)
    target = rel + 4 - 0x100
    _, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, target, 0)
    assert patched & 0xFFF == 0x016
    assert rel + 4 + _signed((patched >> 12) & 0xFFF, 12) == target


def test_bri12_out_of_range_fails(space, rel):
    space.set32(rel, 0x000016)
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel + 4 + 0x1000, 0)


def test_ri6_forward_branch(space, rel):
    space.set32(rel, 0x00008C)
    delta = 0x25
    _, patched = relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel + 4 + delta, 0)
    low, high = patched & 0xFF, (patched >> 8) & 0xFF
    assert low & 0xCF == 0x8C
    assert (low & 0x30) | (high >> 4) == delta


def test_ri6_backward_branch_fails(space, rel):
    space.set32(rel, 0x00008C)
    with pytest.raises(RelocationError):
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel, 0)


def test_unknown_opcode_fails(space, rel):
    space.set32(rel, 0x000000)
    with pytest.raises(RelocationError) as info:
        relocate_symbol(space, rel, XtensaRelocation.SLOT0_OP, rel + 0x10, 0)
    assert info.value.original == 0
    assert space.get32(rel) == 0