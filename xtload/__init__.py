"""Load and relocate Xtensa ELF modules into a simulated address space."""

__version__ = "0.1.0"
__all__ = ["elf_constants", "elf_dynamic", "elf_types", "memory", "relocation", "loader"]