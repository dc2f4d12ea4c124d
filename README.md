# xtload

`xtload` reads 32-bit little-endian ELF relocatable objects built for the
Xtensa architecture. It copies their allocatable sections into an address
space and applies their `R_XTENSA_*` relocations against the module's own
sections and a table of exported host symbols. It then looks up function
addresses by name.

The address space is simulated. `AddressSpace` keeps a heap starting at
`data_base`. Each text allocation is also mapped, in whole pages, into an
executable window starting at `exec_base`. Text buffers are rounded up to
whole cache lines. Byte and unaligned little-endian 32-bit word access works
through either address. With this you can inspect a module's layout and
relocated code without the target device.

## Installation

```
pip install xtload
```

The `test` extra installs pytest:

```
pip install "xtload[test]"
```

## Usage

```python
from pathlib import Path

from xtload.loader import ExportedSymbol, load_module
from xtload.memory import AddressSpace

image = Path("module.o").read_bytes()
exports = [ExportedSymbol("printf", 0x40001000)]
memory = AddressSpace(data_base=0x3C000000, exec_base=0x42000000,
                      page_size=0x10000, cache_line=64)

with load_module(image, exports, memory) as module:
    entry = module.get_function("local_main")
    print(hex(entry), module.text_address())
```

`load_module(image, exports=None, memory=None)`:

- `exports` may be a mapping of names to addresses, or an iterable of
  `ExportedSymbol` objects or `(name, address)` pairs. An export is matched
  by name before the module's own symbols are searched.
- Without `memory`, a new `AddressSpace()` is used, with `data_base`
  `0x3C000000`, `exec_base` `0x42000000`, `page_size` `0x10000` and
  `cache_line` `32`.

`ElfModule.get_function(name)` returns the executable address of the symbol
with that name. `ElfModule.text_address()` returns the heap address of the
loaded `.text` section, or `None` if the module has none. `ElfModule.sections`
lists the loaded sections as `LoadedSection` records, most recently loaded
first. `ElfModule.free()`, which also runs on leaving a `with` block, releases
every section's memory.

Progress is logged with the standard `logging` module under the
`xtload.loader` logger.

## Errors

- `xtload.loader.LoaderError`: the image cannot be loaded or searched. The
  causes are:
  - a bad ELF identification
  - a truncated image
  - a missing `.symtab` section
  - a relocation section that links to a later section
  - a failed section allocation
  - one or more failed relocations, all reported in one message
  - a function name that cannot be found
  - use of a module after it has been freed
- `xtload.relocation.RelocationError`: raised by `relocate_symbol` when a
  single relocation cannot be applied. It carries the word before and after
  the attempt as `original` and `patched`.
- `xtload.memory.MemoryAccessError`: an access or `free` at an address that
  no live allocation covers.
- `xtload.elf_types.ElfFormatError`: a record is truncated, or cannot be
  encoded.

## Modules

- `xtload.elf_constants`: identification, header, section, symbol and
  segment constants as enums. It also has helpers such as `st_bind`,
  `st_info`, `r_sym`, `r_type` and `r_info` that unpack and pack the info
  fields.
- `xtload.elf_dynamic`: dynamic tags and flags, note and auxiliary vector
  types, and ARM and Xtensa relocation types.
- `xtload.elf_types`: `ElfHeader`, `SectionHeader`, `Symbol`, `Rel`, `Rela`,
  `ProgramHeader`, `Dyn` and `NoteHeader`. Each parses from bytes and packs
  back, in 32-bit or 64-bit layout and either byte order.
- `xtload.memory`: `AddressSpace`, `round_down` and `round_up`.
- `xtload.relocation`: `relocate_symbol` and `type_name`.
- `xtload.loader`: `load_module` and `ElfModule`.

## What it does not do

- It does not run loaded code. Addresses point into the simulated address
  space only.
- The loader reads only 32-bit little-endian objects. The 64-bit record
  layouts exist in `xtload.elf_types` only for parsing and packing.
- It applies only `R_XTENSA_32`, `R_XTENSA_SLOT0_OP` and
  `R_XTENSA_ASM_EXPAND` relocations. `R_XTENSA_NONE` entries are skipped, and
  any other type counts as a failed relocation.
- There is no command-line tool. The package is used as a library.