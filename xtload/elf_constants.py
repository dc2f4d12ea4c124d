"""ELF identification, header and section constants, plus the packing helpers
for the st_info, st_other, r_info and m_info fields."""

from __future__ import annotations

from enum import IntEnum, IntFlag

EI_NIDENT = 16

EI_MAG0 = 0
EI_MAG1 = 1
EI_MAG2 = 2
EI_MAG3 = 3
EI_CLASS = 4
EI_DATA = 5
EI_VERSION = 6
EI_OSABI = 7
EI_ABIVERSION = 8
EI_PAD = 9

ELF_MAGIC = b"\x7fELF"

_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


class ElfClass(IntEnum):
    """File class stored at EI_CLASS."""

    NONE = 0
    CLASS32 = 1
    CLASS64 = 2


class ElfData(IntEnum):
    """Data encoding stored at EI_DATA."""

    NONE = 0
    LSB = 1
    MSB = 2


class OsAbi(IntEnum):
    """Operating system ABI stored at EI_OSABI."""

    NONE = 0
    SYSV = 0
    HPUX = 1
    NETBSD = 2
    LINUX = 3
    SOLARIS = 6
    AIX = 7
    IRIX = 8
    FREEBSD = 9
    TRU64 = 10
    MODESTO = 11
    OPENBSD = 12
    ARM = 97
    STANDALONE = 255


class ObjectType(IntEnum):
    """Values of e_type."""

    NONE = 0
    REL = 1
    EXEC = 2
    DYN = 3
    CORE = 4
    LOOS = 0xFE00
    HIOS = 0xFEFF
    LOPROC = 0xFF00
    HIPROC = 0xFFFF


class Machine(IntEnum):
    """Values of e_machine."""

    NONE = 0
    M32 = 1
    SPARC = 2
    I386 = 3
    M68K = 4
    M88K = 5
    I860 = 7
    MIPS = 8
    S370 = 9
    MIPS_RS3_LE = 10
    PARISC = 15
    VPP500 = 17
    SPARC32PLUS = 18
    I960 = 19
    PPC = 20
    PPC64 = 21
    S390 = 22
    V800 = 36
    FR20 = 37
    RH32 = 38
    RCE = 39
    ARM = 40
    FAKE_ALPHA = 41
    SH = 42
    SPARCV9 = 43
    TRICORE = 44
    ARC = 45
    H8_300 = 46
    H8_300H = 47
    H8S = 48
    H8_500 = 49
    IA_64 = 50
    MIPS_X = 51
    COLDFIRE = 52
    M68HC12 = 53
    MMA = 54
    PCP = 55
    NCPU = 56
    NDR1 = 57
    STARCORE = 58
    ME16 = 59
    ST100 = 60
    TINYJ = 61
    X86_64 = 62
    PDSP = 63
    FX66 = 66
    ST9PLUS = 67
    ST7 = 68
    M68HC16 = 69
    M68HC11 = 70
    M68HC08 = 71
    M68HC05 = 72
    SVX = 73
    ST19 = 74
    VAX = 75
    CRIS = 76
    JAVELIN = 77
    FIREPATH = 78
    ZSP = 79
    MMIX = 80
    HUANY = 81
    PRISM = 82
    AVR = 83
    FR30 = 84
    D10V = 85
    D30V = 86
    V850 = 87
    M32R = 88
    MN10300 = 89
    MN10200 = 90
    PJ = 91
    OPENRISC = 92
    ARC_A5 = 93
    XTENSA = 94
    XTENSA_OLD = 0xABC7


class Version(IntEnum):
    """Values of e_version and EI_VERSION."""

    NONE = 0
    CURRENT = 1


class SectionIndex(IntEnum):
    """Special section indices."""

    UNDEF = 0
    LORESERVE = 0xFF00
    LOPROC = 0xFF00
    BEFORE = 0xFF00
    AFTER = 0xFF01
    HIPROC = 0xFF1F
    LOOS = 0xFF20
    HIOS = 0xFF3F
    ABS = 0xFFF1
    COMMON = 0xFFF2
    XINDEX = 0xFFFF
    HIRESERVE = 0xFFFF


class SectionType(IntEnum):
    """Values of sh_type."""

    NULL = 0
    PROGBITS = 1
    SYMTAB = 2
    STRTAB = 3
    RELA = 4
    HASH = 5
    DYNAMIC = 6
    NOTE = 7
    NOBITS = 8
    REL = 9
    SHLIB = 10
    DYNSYM = 11
    INIT_ARRAY = 14
    FINI_ARRAY = 15
    PREINIT_ARRAY = 16
    GROUP = 17
    SYMTAB_SHNDX = 18
    LOOS = 0x60000000
    GNU_ATTRIBUTES = 0x6FFFFFF5
    GNU_HASH = 0x6FFFFFF6
    GNU_LIBLIST = 0x6FFFFFF7
    CHECKSUM = 0x6FFFFFF8
    LOSUNW = 0x6FFFFFFA
    SUNW_MOVE = 0x6FFFFFFA
    SUNW_COMDAT = 0x6FFFFFFB
    SUNW_SYMINFO = 0x6FFFFFFC
    GNU_VERDEF = 0x6FFFFFFD
    GNU_VERNEED = 0x6FFFFFFE
    GNU_VERSYM = 0x6FFFFFFF
    HISUNW = 0x6FFFFFFF
    HIOS = 0x6FFFFFFF
    LOPROC = 0x70000000
    ARM_EXIDX = 0x70000001
    ARM_PREEMPTMAP = 0x70000002
    ARM_ATTRIBUTES = 0x70000003
    HIPROC = 0x7FFFFFFF
    LOUSER = 0x80000000
    HIUSER = 0x8FFFFFFF


class SectionFlag(IntFlag):
    """Bits of sh_flags."""

    WRITE = 1 << 0
    ALLOC = 1 << 1
    EXECINSTR = 1 << 2
    MERGE = 1 << 4
    STRINGS = 1 << 5
    INFO_LINK = 1 << 6
    LINK_ORDER = 1 << 7
    OS_NONCONFORMING = 1 << 8
    GROUP = 1 << 9
    TLS = 1 << 10
    MASKOS = 0x0FF00000
    MASKPROC = 0xF0000000
    ORDERED = 1 << 30
    EXCLUDE = 1 << 31
    ARM_ENTRYSECT = 0x10000000
    ARM_COMDEF = 0x80000000


GRP_COMDAT = 0x1


class SymbolBinding(IntEnum):
    """Binding half of st_info."""

    LOCAL = 0
    GLOBAL = 1
    WEAK = 2
    LOOS = 10
    GNU_UNIQUE = 10
    HIOS = 12
    LOPROC = 13
    HIPROC = 15


class SymbolType(IntEnum):
    """Type half of st_info."""

    NOTYPE = 0
    OBJECT = 1
    FUNC = 2
    SECTION = 3
    FILE = 4
    COMMON = 5
    TLS = 6
    LOOS = 10
    GNU_IFUNC = 10
    HIOS = 12
    LOPROC = 13
    ARM_TFUNC = 13
    HIPROC = 15
    ARM_16BIT = 15


STN_UNDEF = 0


class SymbolVisibility(IntEnum):
    """Visibility encoded in the low bits of st_other."""

    DEFAULT = 0
    INTERNAL = 1
    HIDDEN = 2
    PROTECTED = 3


class SegmentType(IntEnum):
    """Values of p_type."""

    NULL = 0
    LOAD = 1
    DYNAMIC = 2
    INTERP = 3
    NOTE = 4
    SHLIB = 5
    PHDR = 6
    TLS = 7
    LOOS = 0x60000000
    GNU_EH_FRAME = 0x6474E550
    GNU_STACK = 0x6474E551
    GNU_RELRO = 0x6474E552
    LOSUNW = 0x6FFFFFFA
    SUNWBSS = 0x6FFFFFFA
    SUNWSTACK = 0x6FFFFFFB
    HISUNW = 0x6FFFFFFF
    HIOS = 0x6FFFFFFF
    LOPROC = 0x70000000
    ARM_EXIDX = 0x70000001
    HIPROC = 0x7FFFFFFF


class SegmentFlag(IntFlag):
    """Bits of p_flags."""

    X = 1 << 0
    W = 1 << 1
    R = 1 << 2
    MASKOS = 0x0FF00000
    MASKPROC = 0xF0000000
    ARM_SB = 0x10000000
    ARM_PI = 0x20000000
    ARM_ABS = 0x40000000


def st_bind(info: int) -> int:
    """Return the binding stored in an st_info byte."""
    return (info & 0xFF) >> 4


def st_type(info: int) -> int:
    """Return the symbol type stored in an st_info byte."""
    return info & 0xF


def st_info(bind: int, type_: int) -> int:
    """Combine a binding and a symbol type into an st_info value."""
    return (bind << 4) + (type_ & 0xF)


def st_visibility(other: int) -> int:
    """Return the visibility stored in an st_other byte."""
    return other & 0x03


def r_sym(info: int) -> int:
    """Return the symbol index of a 32-bit r_info word."""
    return (info & _U32) >> 8


def r_type(info: int) -> int:
    """Return the relocation type of a 32-bit r_info word."""
    return info & 0xFF


def r_info(sym: int, type_: int) -> int:
    """Combine a symbol index and relocation type into a 32-bit r_info word."""
    return ((sym << 8) + (type_ & 0xFF)) & _U32


def r64_sym(info: int) -> int:
    """Return the symbol index of a 64-bit r_info word."""
    return (info & _U64) >> 32


def r64_type(info: int) -> int:
    """Return the relocation type of a 64-bit r_info word."""
    return info & 0xFFFFFFFF


def r64_info(sym: int, type_: int) -> int:
    """Combine a symbol index and relocation type into a 64-bit r_info word."""
    return (((sym & _U64) << 32) + type_) & _U64


def m_sym(info: int) -> int:
    """Return the symbol index of a move record's m_info."""
    return info >> 8


def m_size(info: int) -> int:
    """Return the size byte of a move record's m_info."""
    return info & 0xFF


def m_info(sym: int, size: int) -> int:
    """Combine a symbol index and size into a move record's m_info."""
    return (sym << 8) + (size & 0xFF)