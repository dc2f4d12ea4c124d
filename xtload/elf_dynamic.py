"""Dynamic section tags and flags, note and auxiliary vector types, and the
processor-specific ARM and Xtensa constants."""

from __future__ import annotations

from enum import IntEnum, IntFlag

_U32 = 0xFFFFFFFF


class DynamicTag(IntEnum):
    """Values of d_tag in a dynamic section entry."""

    NULL = 0
    NEEDED = 1
    PLTRELSZ = 2
    PLTGOT = 3
    HASH = 4
    STRTAB = 5
    SYMTAB = 6
    RELA = 7
    RELASZ = 8
    RELAENT = 9
    STRSZ = 10
    SYMENT = 11
    INIT = 12
    FINI = 13
    SONAME = 14
    RPATH = 15
    SYMBOLIC = 16
    REL = 17
    RELSZ = 18
    RELENT = 19
    PLTREL = 20
    DEBUG = 21
    TEXTREL = 22
    JMPREL = 23
    BIND_NOW = 24
    INIT_ARRAY = 25
    FINI_ARRAY = 26
    INIT_ARRAYSZ = 27
    FINI_ARRAYSZ = 28
    RUNPATH = 29
    FLAGS = 30
    ENCODING = 32
    PREINIT_ARRAY = 32
    PREINIT_ARRAYSZ = 33
    LOOS = 0x6000000D
    VALRNGLO = 0x6FFFFD00
    GNU_PRELINKED = 0x6FFFFDF5
    GNU_CONFLICTSZ = 0x6FFFFDF6
    GNU_LIBLISTSZ = 0x6FFFFDF7
    CHECKSUM = 0x6FFFFDF8
    PLTPADSZ = 0x6FFFFDF9
    MOVEENT = 0x6FFFFDFA
    MOVESZ = 0x6FFFFDFB
    FEATURE_1 = 0x6FFFFDFC
    POSFLAG_1 = 0x6FFFFDFD
    SYMINSZ = 0x6FFFFDFE
    SYMINENT = 0x6FFFFDFF
    VALRNGHI = 0x6FFFFDFF
    ADDRRNGLO = 0x6FFFFE00
    GNU_HASH = 0x6FFFFEF5
    TLSDESC_PLT = 0x6FFFFEF6
    TLSDESC_GOT = 0x6FFFFEF7
    GNU_CONFLICT = 0x6FFFFEF8
    GNU_LIBLIST = 0x6FFFFEF9
    CONFIG = 0x6FFFFEFA
    DEPAUDIT = 0x6FFFFEFB
    AUDIT = 0x6FFFFEFC
    PLTPAD = 0x6FFFFEFD
    MOVETAB = 0x6FFFFEFE
    SYMINFO = 0x6FFFFEFF
    ADDRRNGHI = 0x6FFFFEFF
    VERSYM = 0x6FFFFFF0
    RELACOUNT = 0x6FFFFFF9
    RELCOUNT = 0x6FFFFFFA
    FLAGS_1 = 0x6FFFFFFB
    VERDEF = 0x6FFFFFFC
    VERDEFNUM = 0x6FFFFFFD
    VERNEED = 0x6FFFFFFE
    VERNEEDNUM = 0x6FFFFFFF
    HIOS = 0x6FFFF000
    LOPROC = 0x70000000
    AUXILIARY = 0x7FFFFFFD
    FILTER = 0x7FFFFFFF
    HIPROC = 0x7FFFFFFF


DT_NUM = 34
DT_VALNUM = 12
DT_ADDRNUM = 11
DT_VERSIONTAGNUM = 16
DT_EXTRANUM = 3


class DynamicFlag(IntFlag):
    """Bits of the DT_FLAGS value."""

    ORIGIN = 0x00000001
    SYMBOLIC = 0x00000002
    TEXTREL = 0x00000004
    BIND_NOW = 0x00000008
    STATIC_TLS = 0x00000010


class DynamicFlag1(IntFlag):
    """Bits of the DT_FLAGS_1 value."""

    NOW = 0x00000001
    GLOBAL = 0x00000002
    GROUP = 0x00000004
    NODELETE = 0x00000008
    LOADFLTR = 0x00000010
    INITFIRST = 0x00000020
    NOOPEN = 0x00000040
    ORIGIN = 0x00000080
    DIRECT = 0x00000100
    TRANS = 0x00000200
    INTERPOSE = 0x00000400
    NODEFLIB = 0x00000800
    NODUMP = 0x00001000
    CONFALT = 0x00002000
    ENDFILTEE = 0x00004000
    DISPRELDNE = 0x00008000
    DISPRELPND = 0x00010000


DTF_1_PARINIT = 0x00000001
DTF_1_CONFEXP = 0x00000002

DF_P1_LAZYLOAD = 0x00000001
DF_P1_GROUPPERM = 0x00000002

SYMINFO_BT_SELF = 0xFFFF
SYMINFO_BT_PARENT = 0xFFFE
SYMINFO_BT_LOWRESERVE = 0xFF00
SYMINFO_FLG_DIRECT = 0x0001
SYMINFO_FLG_PASSTHRU = 0x0002
SYMINFO_FLG_COPY = 0x0004
SYMINFO_FLG_LAZYLOAD = 0x0008
SYMINFO_NONE = 0
SYMINFO_CURRENT = 1

VER_DEF_NONE = 0
VER_DEF_CURRENT = 1
VER_FLG_BASE = 0x1
VER_FLG_WEAK = 0x2
VER_NDX_LOCAL = 0
VER_NDX_GLOBAL = 1
VER_NDX_LORESERVE = 0xFF00
VER_NDX_ELIMINATE = 0xFF01
VER_NEED_NONE = 0
VER_NEED_CURRENT = 1


class NoteType(IntEnum):
    """Note descriptor types of core files, plus the object-file version note."""

    PRSTATUS = 1
    VERSION = 1
    FPREGSET = 2
    PRPSINFO = 3
    PRXREG = 4
    TASKSTRUCT = 4
    PLATFORM = 5
    AUXV = 6
    GWINDOWS = 7
    ASRS = 8
    PSTATUS = 10
    PSINFO = 13
    PRCRED = 14
    UTSNAME = 15
    LWPSTATUS = 16
    LWPSINFO = 17
    PRFPXREG = 20
    PPC_VMX = 0x100
    PPC_SPE = 0x101
    PPC_VSX = 0x102
    I386_TLS = 0x200
    I386_IOPERM = 0x201
    PRXFPREG = 0x46E62B7F


class GnuNoteType(IntEnum):
    """Note types used under the "GNU" note name."""

    ABI_TAG = 1
    HWCAP = 2
    BUILD_ID = 3
    GOLD_VERSION = 4


ELF_NOTE_SOLARIS = "SUNW Solaris"
ELF_NOTE_GNU = "GNU"
ELF_NOTE_PAGESIZE_HINT = 1
ELF_NOTE_OS_LINUX = 0
ELF_NOTE_OS_GNU = 1
ELF_NOTE_OS_SOLARIS2 = 2
ELF_NOTE_OS_FREEBSD = 3


class AuxType(IntEnum):
    """Values of a_type in the auxiliary vector."""

    NULL = 0
    IGNORE = 1
    EXECFD = 2
    PHDR = 3
    PHENT = 4
    PHNUM = 5
    PAGESZ = 6
    BASE = 7
    FLAGS = 8
    ENTRY = 9
    NOTELF = 10
    UID = 11
    EUID = 12
    GID = 13
    EGID = 14
    PLATFORM = 15
    HWCAP = 16
    CLKTCK = 17
    FPUCW = 18
    DCACHEBSIZE = 19
    ICACHEBSIZE = 20
    UCACHEBSIZE = 21
    IGNOREPPC = 22
    SECURE = 23
    BASE_PLATFORM = 24
    RANDOM = 25
    EXECFN = 31
    SYSINFO = 32
    SYSINFO_EHDR = 33
    L1I_CACHESHAPE = 34
    L1D_CACHESHAPE = 35
    L2_CACHESHAPE = 36
    L3_CACHESHAPE = 37


class ArmFlag(IntFlag):
    """ARM-specific bits of e_flags."""

    RELEXEC = 0x01
    HASENTRY = 0x02
    INTERWORK = 0x04
    SYMSARESORTED = 0x04
    APCS_26 = 0x08
    DYNSYMSUSESEGIDX = 0x08
    APCS_FLOAT = 0x10
    MAPSYMSFIRST = 0x10
    PIC = 0x20
    ALIGN8 = 0x40
    NEW_ABI = 0x80
    OLD_ABI = 0x100
    SOFT_FLOAT = 0x200
    VFP_FLOAT = 0x400
    MAVERICK_FLOAT = 0x800
    LE8 = 0x00400000
    BE8 = 0x00800000
    EABIMASK = 0xFF000000


EF_ARM_EABI_UNKNOWN = 0x00000000
EF_ARM_EABI_VER1 = 0x01000000
EF_ARM_EABI_VER2 = 0x02000000
EF_ARM_EABI_VER3 = 0x03000000
EF_ARM_EABI_VER4 = 0x04000000
EF_ARM_EABI_VER5 = 0x05000000


class ArmRelocation(IntEnum):
    """ARM relocation types."""

    NONE = 0
    PC24 = 1
    ABS32 = 2
    REL32 = 3
    PC13 = 4
    ABS16 = 5
    ABS12 = 6
    THM_ABS5 = 7
    ABS8 = 8
    SBREL32 = 9
    THM_PC22 = 10
    THM_PC8 = 11
    AMP_VCALL9 = 12
    SWI24 = 13
    THM_SWI8 = 14
    XPC25 = 15
    THM_XPC22 = 16
    TLS_DTPMOD32 = 17
    TLS_DTPOFF32 = 18
    TLS_TPOFF32 = 19
    COPY = 20
    GLOB_DAT = 21
    JUMP_SLOT = 22
    RELATIVE = 23
    GOTOFF = 24
    GOTPC = 25
    GOT32 = 26
    PLT32 = 27
    THM_JUMP24 = 30
    ALU_PCREL_7_0 = 32
    ALU_PCREL_15_8 = 33
    ALU_PCREL_23_15 = 34
    LDR_SBREL_11_0 = 35
    ALU_SBREL_19_12 = 36
    ALU_SBREL_27_20 = 37
    GNU_VTENTRY = 100
    GNU_VTINHERIT = 101
    THM_PC11 = 102
    THM_PC9 = 103
    TLS_GD32 = 104
    TLS_LDM32 = 105
    TLS_LDO32 = 106
    TLS_IE32 = 107
    TLS_LE32 = 108
    RXPC25 = 249
    RSBREL32 = 250
    THM_RPC22 = 251
    RREL32 = 252
    RABS22 = 253
    RPC24 = 254
    RBASE = 255


R_ARM_NUM = 256


class XtensaRelocation(IntEnum):
    """Xtensa relocation types."""

    NONE = 0
    R32 = 1
    RTLD = 2
    GLOB_DAT = 3
    JMP_SLOT = 4
    RELATIVE = 5
    PLT = 6
    OP0 = 8
    OP1 = 9
    OP2 = 10
    ASM_EXPAND = 11
    ASM_SIMPLIFY = 12
    GNU_VTINHERIT = 15
    GNU_VTENTRY = 16
    DIFF8 = 17
    DIFF16 = 18
    DIFF32 = 19
    SLOT0_OP = 20
    SLOT1_OP = 21
    SLOT2_OP = 22
    SLOT3_OP = 23
    SLOT4_OP = 24
    SLOT5_OP = 25
    SLOT6_OP = 26
    SLOT7_OP = 27
    SLOT8_OP = 28
    SLOT9_OP = 29
    SLOT10_OP = 30
    SLOT11_OP = 31
    SLOT12_OP = 32
    SLOT13_OP = 33
    SLOT14_OP = 34
    SLOT0_ALT = 35
    SLOT1_ALT = 36
    SLOT2_ALT = 37
    SLOT3_ALT = 38
    SLOT4_ALT = 39
    SLOT5_ALT = 40
    SLOT6_ALT = 41
    SLOT7_ALT = 42
    SLOT8_ALT = 43
    SLOT9_ALT = 44
    SLOT10_ALT = 45
    SLOT11_ALT = 46
    SLOT12_ALT = 47
    SLOT13_ALT = 48
    SLOT14_ALT = 49


def dt_valtagidx(tag: int) -> int:
    """Index of a tag in the value range, counted down from DT_VALRNGHI."""
    return DynamicTag.VALRNGHI - tag


def dt_addrtagidx(tag: int) -> int:
    """Index of a tag in the address range, counted down from DT_ADDRRNGHI."""
    return DynamicTag.ADDRRNGHI - tag


def dt_versiontagidx(tag: int) -> int:
    """Index of a versioning tag, counted down from DT_VERNEEDNUM."""
    return DynamicTag.VERNEEDNUM - tag


def dt_extratagidx(tag: int) -> int:
    """Index of a Sun extension tag in the processor-specific range."""
    value = tag & 0x7FFFFFFF
    if value & 0x40000000:
        value -= 0x80000000
    return (-value - 1) & _U32


def arm_eabi_version(flags: int) -> int:
    """Return the EABI version bits of an ARM e_flags word."""
    return flags & ArmFlag.EABIMASK