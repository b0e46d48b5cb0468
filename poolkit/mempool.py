"""A memory pool over a simulated address space.

Small requests are carved out of fixed-size blocks by bumping a cursor.
Requests larger than the pool's limit get their own region and are tracked
in a list of large records that can be freed one by one. Addresses are
plain integers; :meth:`MemoryPool.buffer` gives access to the bytes behind
them.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

ALIGNMENT = 32
PAGE_SIZE = 4096
MAX_ALLOC_FROM_POOL = PAGE_SIZE - 1

_POOL_HEADER = 24
_NODE_HEADER = 32
_LARGE_RECORD = 16
_POINTER_SIZE = 8
_MAX_FAILED = 4
_LARGE_SCAN_LIMIT = 3


def align(n, alignment):
    """Round ``n`` up to a multiple of ``alignment`` (a power of two)."""
    return (n + (alignment - 1)) & ~(alignment - 1)


class _AddressSpace:
    """Hands out non-overlapping, aligned address ranges."""

    def __init__(self, start=0x10000):
        self._next = start

    def reserve(self, size, alignment):
        address = align(self._next, alignment)
        self._next = address + max(size, 1)
        return address


@dataclass
class _Node:
    base: int
    last: int
    end: int
    data: bytearray = field(repr=False)
    failed: int = 0


@dataclass
class _Large:
    alloc: int | None


class MemoryPool:
    """Block-based pool for small allocations with a list of large ones."""

    def __init__(self, size):
        if size < 0:
            raise ValueError("pool size must not be negative")
        self._space = _AddressSpace()
        pool_address = self._space.reserve(
            size + _POOL_HEADER + _NODE_HEADER, ALIGNMENT
        )
        self.max = min(size, MAX_ALLOC_FROM_POOL)
        base = pool_address + _POOL_HEADER
        start = base + _NODE_HEADER
        end = start + size
        self._nodes = [_Node(base, start, end, bytearray(end - base))]
        self._current = 0
        self._large: list[_Large] = []
        self._large_regions: dict[int, bytearray] = {}
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _check_open(self):
        if self._closed:
            raise ValueError("memory pool is closed")

    @staticmethod
    def _check_size(size):
        if size < 0:
            raise ValueError("allocation size must not be negative")

    def alloc(self, size):
        """Allocate ``size`` bytes aligned to ``ALIGNMENT``; return the address."""
        return self._allocate(size, aligned=True)

    def nalloc(self, size):
        """Allocate ``size`` bytes without alignment; return the address."""
        return self._allocate(size, aligned=False)

    def calloc(self, size):
        """Allocate ``size`` aligned bytes and fill them with zeros."""
        address = self.alloc(size)
        self.buffer(address, size)[:] = bytes(size)
        return address

    def _allocate(self, size, aligned):
        self._check_open()
        self._check_size(size)
        if size <= self.max:
            for node in self._nodes[self._current:]:
                start = align(node.last, ALIGNMENT) if aligned else node.last
                if node.end - start >= size:
                    node.last = start + size
                    return start
            return self._alloc_block(size)
        return self._alloc_large(size)

    def _alloc_block(self, size):
        head = self._nodes[0]
        block_size = head.end - head.base
        base = self._space.reserve(block_size, ALIGNMENT)
        start = align(base + _NODE_HEADER, ALIGNMENT)
        new_node = _Node(base, start + size, base + block_size, bytearray(block_size))

        current = self._current
        for index, node in enumerate(
            self._nodes[self._current:-1], start=self._current
        ):
            failed = node.failed
            node.failed += 1
            if failed > _MAX_FAILED:
                current = index + 1
        self._nodes.append(new_node)
        self._current = current
        return start

    def _attach_large(self, address):
        # The record describing a large region lives in the pool itself.
        if _LARGE_RECORD <= self.max:
            self._allocate(_LARGE_RECORD, aligned=True)
        self._large.insert(0, _Large(address))

    def _alloc_large(self, size):
        address = self._space.reserve(size, 2 * _POINTER_SIZE)
        self._large_regions[address] = bytearray(size)
        for index, record in enumerate(self._large):
            if record.alloc is None:
                record.alloc = address
                return address
            if index > _LARGE_SCAN_LIMIT:
                break
        self._attach_large(address)
        return address

    def memalign(self, size, alignment):
        """Allocate a large region of ``size`` bytes at the given alignment."""
        self._check_open()
        self._check_size(size)
        if (
            alignment < _POINTER_SIZE
            or alignment & (alignment - 1)
            or alignment % _POINTER_SIZE
        ):
            raise ValueError(
                "alignment must be a power of two and a multiple of the pointer size"
            )
        address = self._space.reserve(size, alignment)
        self._large_regions[address] = bytearray(size)
        self._attach_large(address)
        return address

    def free(self, address):
        """Release a large region; addresses the pool does not track are ignored."""
        self._check_open()
        if address is None:
            return
        for record in self._large:
            if record.alloc == address:
                self._large_regions.pop(address, None)
                record.alloc = None
                return

    def reset(self):
        """Release every large region and make all blocks empty again."""
        self._check_open()
        self._large_regions.clear()
        self._large = []
        for node in self._nodes:
            node.last = node.base + _NODE_HEADER

    def close(self):
        """Release everything the pool holds; the pool cannot be used afterwards."""
        self._large_regions.clear()
        self._large = []
        self._nodes = []
        self._closed = True

    def buffer(self, address, size):
        """Return a writable view of ``size`` bytes starting at ``address``."""
        self._check_open()
        self._check_size(size)
        stop = address + size
        for node in self._nodes:
            if node.base + _NODE_HEADER <= address and stop <= node.end:
                offset = address - node.base
                return memoryview(node.data)[offset:offset + size]
        for start, data in self._large_regions.items():
            if start <= address and stop <= start + len(data):
                offset = address - start
                return memoryview(data)[offset:offset + size]
        raise ValueError(f"address range {address:#x}+{size} is not allocated")


def main(argv=None):
    """Run a short demonstration of the pool."""
    parser = argparse.ArgumentParser(
        prog="poolkit-mempool", description="Exercise a memory pool."
    )
    parser.parse_args(argv)

    size = 1 << 12
    with MemoryPool(size) as pool:
        for _ in range(10):
            pool.alloc(512)

        print(f"mp_create_pool: {pool.max}")
        print(f"mp_align(24, 32): {align(24, 32)}, mp_align(17, 32): {align(17, 32)}")
        current = pool._nodes[pool._current].base
        print(f"mp_align_ptr(current, 32): {align(current, 32):#x}, current: {current:#x}")

        for _ in range(5):
            chunk = pool.buffer(pool.calloc(32), 32)
            print("calloc wrong" if any(chunk) else "calloc success")

        for _ in range(5):
            pool.free(pool.alloc(8192))

        pool.reset()

        for _ in range(58):
            pool.alloc(256)
    return 0