"""A simulated 32-bit address space: a data heap, pages of it mapped a second
time at an executable address, and byte-exact unaligned little-endian access."""

from __future__ import annotations

import bisect
from dataclasses import dataclass

_U32 = 0xFFFFFFFF
_HEAP_ALIGN = 4


class MemoryAccessError(IndexError):
    """Raised when an address is not backed by any live allocation."""


def round_down(value: int, multiple: int) -> int:
    """Round ``value`` down to a multiple of the power of two ``multiple``."""
    return value & ~(multiple - 1)


def round_up(value: int, multiple: int) -> int:
    """Round ``value`` up to a multiple of the power of two ``multiple``."""
    return (value + multiple - 1) & ~(multiple - 1)


def _check_power_of_two(name: str, value: int) -> None:
    if value <= 0 or value & (value - 1):
        raise ValueError(f"{name} must be a positive power of two, got {value}")


@dataclass
class _Block:
    start: int
    data: bytearray

    @property
    def end(self) -> int:
        return self.start + len(self.data)


@dataclass(frozen=True)
class _Mapping:
    exec_start: int
    size: int
    phys_start: int
    owner: int

    def contains(self, address: int) -> bool:
        return self.exec_start <= address < self.exec_start + self.size


class AddressSpace:
    """Heap memory with an instruction-bus alias for text allocations.

    Heap addresses start at ``data_base``; the physical address of a heap byte
    is its distance from ``data_base``. Text allocations are additionally
    mapped, whole pages at a time, into a window starting at ``exec_base``.
    """

    def __init__(
        self,
        data_base: int = 0x3C000000,
        exec_base: int = 0x42000000,
        page_size: int = 0x10000,
        cache_line: int = 32,
    ) -> None:
        _check_power_of_two("page_size", page_size)
        _check_power_of_two("cache_line", cache_line)
        for name, base in (("data_base", data_base), ("exec_base", exec_base)):
            if not 0 <= base <= _U32:
                raise ValueError(f"{name} must fit in 32 bits, got {base:#x}")
        self.data_base = data_base
        self.exec_base = round_up(exec_base, page_size)
        self.page_size = page_size
        self.cache_line = cache_line
        self._blocks: list[_Block] = []
        self._starts: list[int] = []
        self._mappings: list[_Mapping] = []
        self._heap_cursor = data_base
        self._exec_cursor = self.exec_base

    # Allocation

    def _allocate(self, size: int, align: int) -> int:
        if size <= 0:
            raise ValueError(f"allocation size must be positive, got {size}")
        start = round_up(self._heap_cursor, align)
        end = start + size
        if end - 1 > _U32:
            raise MemoryError(f"cannot allocate {size} bytes: address space exhausted")
        block = _Block(start, bytearray(size))
        index = bisect.bisect_left(self._starts, start)
        self._starts.insert(index, start)
        self._blocks.insert(index, block)
        self._heap_cursor = end
        return start

    def allocate_data(self, size: int) -> int:
        """Allocate ``size`` bytes of heap and return their address."""
        return self._allocate(size, _HEAP_ALIGN)

    def allocate_text(self, size: int) -> tuple[int, int]:
        """Allocate executable memory; return its heap and executable addresses.

        The heap buffer is rounded up to whole cache lines, and the pages that
        hold it are mapped into the executable window.
        """
        if size <= 0:
            raise ValueError(f"allocation size must be positive, got {size}")
        heap = self._allocate(round_up(size, self.cache_line), self.cache_line)
        paddr = heap - self.data_base
        low = round_down(paddr, self.page_size)
        high = round_up(paddr + size, self.page_size)
        map_size = high - low
        exec_start = self._exec_cursor
        if exec_start + map_size - 1 > _U32:
            self.free(heap)
            raise MemoryError(f"cannot map {map_size} bytes: executable window exhausted")
        self._mappings.append(_Mapping(exec_start, map_size, low, heap))
        self._exec_cursor = exec_start + map_size
        return heap, exec_start + (paddr - low)

    def free(self, address: int) -> None:
        """Release the allocation that starts at heap address ``address``."""
        index = bisect.bisect_left(self._starts, address)
        if index == len(self._starts) or self._starts[index] != address:
            raise MemoryAccessError(f"no allocation starts at {address:#010x}")
        del self._starts[index]
        del self._blocks[index]
        self._mappings = [m for m in self._mappings if m.owner != address]

    # Address resolution

    def _locate(self, address: int) -> tuple[_Block, int]:
        for mapping in self._mappings:
            if mapping.contains(address):
                address = self.data_base + mapping.phys_start + (address - mapping.exec_start)
                break
        index = bisect.bisect_right(self._starts, address) - 1
        if index >= 0:
            block = self._blocks[index]
            if address < block.end:
                return block, address - block.start
        raise MemoryAccessError(f"address {address:#010x} is not mapped")

    # Access

    def get8(self, address: int) -> int:
        """Read the byte at ``address``."""
        block, offset = self._locate(address)
        return block.data[offset]

    def set8(self, address: int, value: int) -> None:
        """Store the low byte of ``value`` at ``address``."""
        block, offset = self._locate(address)
        block.data[offset] = value & 0xFF

    def get32(self, address: int) -> int:
        """Read a little-endian 32-bit word at any alignment."""
        return int.from_bytes(self.read(address, 4), "little")

    def set32(self, address: int, value: int) -> None:
        """Store ``value`` as a little-endian 32-bit word at any alignment."""
        self.write(address, (value & _U32).to_bytes(4, "little"))

    def read(self, address: int, size: int) -> bytes:
        """Read ``size`` bytes starting at ``address``."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        return bytes(self.get8(address + n) for n in range(size))

    def write(self, address: int, data: bytes | bytearray | memoryview) -> None:
        """Store ``data`` starting at ``address``."""
        for n, byte in enumerate(bytes(data)):
            self.set8(address + n, byte)

    def copy(self, dest: int, src: int, size: int) -> None:
        """Copy ``size`` bytes from ``src`` to ``dest``, one byte at a time, forwards."""
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        for n in range(size):
            self.set8(dest + n, self.get8(src + n))