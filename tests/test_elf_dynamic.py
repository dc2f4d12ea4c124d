import pytest

from xtload.elf_dynamic import (
    DT_ADDRNUM,
    DT_EXTRANUM,
    DT_VALNUM,
    DT_VERSIONTAGNUM,
    EF_ARM_EABI_UNKNOWN,
    EF_ARM_EABI_VER4,
    EF_ARM_EABI_VER5,
    ArmFlag,
    DynamicFlag,
    DynamicFlag1,
    DynamicTag,
    XtensaRelocation,
    arm_eabi_version,
    dt_addrtagidx,
    dt_extratagidx,
    dt_valtagidx,
    dt_versiontagidx,
)

VAL_TAGS = [
    DynamicTag.GNU_PRELINKED,
    DynamicTag.GNU_CONFLICTSZ,
    DynamicTag.GNU_LIBLISTSZ,
    DynamicTag.CHECKSUM,
    DynamicTag.PLTPADSZ,
    DynamicTag.MOVEENT,
    DynamicTag.MOVESZ,
    DynamicTag.FEATURE_1,
    DynamicTag.POSFLAG_1,
    DynamicTag.SYMINSZ,
    DynamicTag.SYMINENT,
]

ADDR_TAGS = [
    DynamicTag.GNU_HASH,
    DynamicTag.TLSDESC_PLT,
    DynamicTag.TLSDESC_GOT,
    DynamicTag.GNU_CONFLICT,
    DynamicTag.GNU_LIBLIST,
    DynamicTag.CONFIG,
    DynamicTag.DEPAUDIT,
    DynamicTag.AUDIT,
    DynamicTag.PLTPAD,
    DynamicTag.MOVETAB,
    DynamicTag.SYMINFO,
]

VERSION_TAGS = [
    DynamicTag.VERSYM,
    DynamicTag.RELACOUNT,
    DynamicTag.RELCOUNT,
    DynamicTag.FLAGS_1,
    DynamicTag.VERDEF,
    DynamicTag.VERDEFNUM,
    DynamicTag.VERNEED,
    DynamicTag.VERNEEDNUM,
]


def test_valtagidx_top_of_range_is_zero():
    assert dt_valtagidx(DynamicTag.VALRNGHI) == 0


@pytest.mark.parametrize("tag", VAL_TAGS)
def test_valtagidx_within_table(tag):
    assert 0 <= dt_valtagidx(tag) < DT_VALNUM


def test_valtagidx_distinct():
    indices = [dt_valtagidx(tag) for tag in VAL_TAGS]
    assert len(set(indices)) == len(indices)


def test_addrtagidx_top_of_range_is_zero():
    assert dt_addrtagidx(DynamicTag.ADDRRNGHI) == 0


@pytest.mark.parametrize("tag", ADDR_TAGS)
def test_addrtagidx_within_table(tag):
    assert 0 <= dt_addrtagidx(tag) < DT_ADDRNUM


def test_addrtagidx_distinct():
    indices = [dt_addrtagidx(tag) for tag in ADDR_TAGS]
    assert sorted(indices) == list(range(DT_ADDRNUM))


@pytest.mark.parametrize("tag", VERSION_TAGS)
def test_versiontagidx_within_table(tag):
    assert 0 <= dt_versiontagidx(tag) < DT_VERSIONTAGNUM


def test_versiontagidx_top_is_zero():
    assert dt_versiontagidx(DynamicTag.VERNEEDNUM) == 0


def test_extratagidx_filter_is_first():
    assert dt_extratagidx(DynamicTag.FILTER) == 0


def test_extratagidx_auxiliary_within_table():
    idx = dt_extratagidx(DynamicTag.AUXILIARY)
    assert 0 < idx < DT_EXTRANUM


def test_extratagidx_decreasing_tags_give_increasing_indices():
    high = dt_extratagidx(DynamicTag.FILTER)
    low = dt_extratagidx(DynamicTag.AUXILIARY)
    assert low - high == DynamicTag.FILTER - DynamicTag.AUXILIARY


def test_arm_eabi_version_strips_other_flags():
    flags = EF_ARM_EABI_VER5 | ArmFlag.BE8 | ArmFlag.INTERWORK | ArmFlag.PIC
    assert arm_eabi_version(flags) == EF_ARM_EABI_VER5


def test_arm_eabi_version_unknown_when_no_version_bits():
    assert arm_eabi_version(ArmFlag.SOFT_FLOAT | ArmFlag.LE8) == EF_ARM_EABI_UNKNOWN


def test_arm_eabi_version_distinguishes_versions():
    assert arm_eabi_version(EF_ARM_EABI_VER4 | ArmFlag.HASENTRY) == EF_ARM_EABI_VER4
    assert arm_eabi_version(EF_ARM_EABI_VER4) != arm_eabi_version(EF_ARM_EABI_VER5)


def test_arm_flag_aliases_share_bits():
    assert ArmFlag(0x04) is ArmFlag.SYMSARESORTED
    assert ArmFlag(0x04) is ArmFlag.INTERWORK
    assert ArmFlag(0x10) is ArmFlag.MAPSYMSFIRST
    assert ArmFlag(0x10) is ArmFlag.APCS_FLOAT


def test_dynamic_tag_aliases_resolve_to_first_name():
    assert DynamicTag(DynamicTag.PREINIT_ARRAY) is DynamicTag.ENCODING
    assert DynamicTag(DynamicTag.VALRNGHI) is DynamicTag.SYMINENT
    assert DynamicTag(DynamicTag.ADDRRNGHI) is DynamicTag.SYMINFO


def test_dynamic_flags_combine():
    combined = DynamicFlag(0x08 | 0x04)
    assert combined == DynamicFlag.BIND_NOW | DynamicFlag.TEXTREL
    assert DynamicFlag.BIND_NOW in combined
    assert DynamicFlag.ORIGIN not in combined


def test_dynamic_flag1_combine():
    combined = DynamicFlag1(0x01 | 0x08)
    assert combined == DynamicFlag1.NOW | DynamicFlag1.NODELETE
    assert combined & DynamicFlag1.NODELETE == DynamicFlag1.NODELETE
    assert not combined & DynamicFlag1.GLOBAL


def test_xtensa_relocation_lookup_by_value():
    assert XtensaRelocation(XtensaRelocation.SLOT0_OP.value) is XtensaRelocation.SLOT0_OP
    with pytest.raises(ValueError):
        XtensaRelocation(7)