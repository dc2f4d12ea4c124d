import pytest

from xtload.elf_constants import (
    ElfClass,
    ElfData,
    Machine,
    ObjectType,
    OsAbi,
    SectionFlag,
    SectionIndex,
    SectionType,
    SegmentFlag,
    SegmentType,
    SymbolBinding,
    SymbolType,
    SymbolVisibility,
    Version,
    m_info,
    m_size,
    m_sym,
    r64_info,
    r64_sym,
    r64_type,
    r_info,
    r_sym,
    r_type,
    st_bind,
    st_info,
    st_type,
    st_visibility,
)


def test_documented_values():
    assert Machine(94) is Machine.XTENSA
    assert Machine(0xABC7) is Machine.XTENSA_OLD
    assert SegmentType(0x6474E551) is SegmentType.GNU_STACK


def test_enum_lookup_by_value():
    assert ElfClass(1) is ElfClass.CLASS32
    assert ElfData(2) is ElfData.MSB
    assert ObjectType(1) is ObjectType.REL
    assert Version(1) is Version.CURRENT
    assert SectionType(4) is SectionType.RELA


def test_enum_aliases_share_value():
    assert OsAbi(0) is OsAbi.SYSV
    assert OsAbi(0) is OsAbi.NONE
    assert SectionIndex(0xFF00) is SectionIndex.BEFORE
    assert SectionIndex(0xFF00) is SectionIndex.LORESERVE
    assert SymbolBinding(10) is SymbolBinding.GNU_UNIQUE
    assert SymbolBinding(10) is SymbolBinding.LOOS
    assert SymbolType(13) is SymbolType.ARM_TFUNC
    assert SymbolType(13) is SymbolType.LOPROC
    assert SectionType(0x6FFFFFFF) is SectionType.HIOS
    assert SectionType(0x6FFFFFFF) is SectionType.GNU_VERSYM


def test_unknown_value_rejected():
    with pytest.raises(ValueError):
        ElfClass(7)
    with pytest.raises(ValueError):
        Machine(6)


def test_section_flags_are_disjoint_bits():
    combined = SectionFlag(0x2 | 0x4)
    assert combined == SectionFlag.ALLOC | SectionFlag.EXECINSTR
    assert SectionFlag.ALLOC in combined
    assert SectionFlag.WRITE not in combined
    assert combined & SectionFlag.EXECINSTR == SectionFlag.EXECINSTR
    assert SectionFlag(1 << 31) & SectionFlag.MASKPROC == SectionFlag.EXCLUDE


def test_segment_flags_combine():
    rx = SegmentFlag(0x4 | 0x1)
    assert rx == SegmentFlag.R | SegmentFlag.X
    assert SegmentFlag.W not in rx
    assert SegmentFlag(0x20000000) & SegmentFlag.MASKPROC == SegmentFlag.ARM_PI


def test_st_info_worked_example():
    value = st_info(SymbolBinding.GLOBAL, SymbolType.FUNC)
    assert value == 0x12
    assert st_bind(value) == SymbolBinding.GLOBAL
    assert st_type(value) == SymbolType.FUNC


@pytest.mark.parametrize("bind", list(range(16)))
@pytest.mark.parametrize("type_", [0, 1, 2, 3, 6, 10, 15])
def test_st_info_round_trip(bind, type_):
    value = st_info(bind, type_)
    assert st_bind(value) == bind
    assert st_type(value) == type_


def test_st_bind_reads_only_low_byte():
    assert st_bind(0x1F2) == st_bind(0xF2)


@pytest.mark.parametrize("vis", list(SymbolVisibility))
def test_st_visibility_ignores_high_bits(vis):
    assert st_visibility(0xF8 | vis) == vis
    assert st_visibility(vis) == vis


def test_r_info_worked_example():
    assert r_info(5, 20) == 0x514


@pytest.mark.parametrize("sym", [0, 1, 255, 0xFFFF, 0xFFFFFF])
@pytest.mark.parametrize("type_", [0, 1, 11, 20, 255])
def test_r_info_round_trip(sym, type_):
    info = r_info(sym, type_)
    assert r_sym(info) == sym
    assert r_type(info) == type_
    assert 0 <= info <= 0xFFFFFFFF


def test_r_info_masks_type_to_byte():
    assert r_type(r_info(3, 0x1FF)) == r_type(r_info(3, 0xFF))
    assert r_sym(r_info(3, 0x1FF)) == 3


@pytest.mark.parametrize("sym", [0, 1, 0xFFFFFFFF])
@pytest.mark.parametrize("type_", [0, 1, 0xFFFFFFFF])
def test_r64_info_round_trip(sym, type_):
    info = r64_info(sym, type_)
    assert r64_sym(info) == sym
    assert r64_type(info) == type_
    assert 0 <= info <= 0xFFFFFFFFFFFFFFFF


@pytest.mark.parametrize("sym", [0, 7, 0x123456])
@pytest.mark.parametrize("size", [0, 1, 4, 255])
def test_m_info_round_trip(sym, size):
    info = m_info(sym, size)
    assert m_sym(info) == sym
    assert m_size(info) == size


def test_m_info_truncates_size_to_byte():
    assert m_size(m_info(2, 0x104)) == m_size(m_info(2, 0x04))
    assert m_sym(m_info(2, 0x104)) == 2