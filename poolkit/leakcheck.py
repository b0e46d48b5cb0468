"""Allocation tracking that records each live block as a file.

Every allocation writes ``<address>.mem`` into a directory, naming the
caller and the size; every free removes that file. Files left behind are
leaks, and a free with no file is a double free.
"""

from __future__ import annotations

import argparse
import inspect
from pathlib import Path

_BLOCK_ALIGNMENT = 16


class DoubleFreeError(Exception):
    """Raised when an address is freed that has no live allocation."""

    def __init__(self, address):
        super().__init__(f"double free: {address:#x}")
        self.address = address


class LeakTracker:
    """Hands out blocks and keeps a record file for each one still live."""

    def __init__(self, directory="mem"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._next = 0x10000
        self._blocks: dict[int, bytearray] = {}

    def _path(self, address):
        return self.directory / f"{address:#x}.mem"

    def malloc(self, size):
        """Allocate ``size`` bytes, record the caller and return the address."""
        if size < 0:
            raise ValueError("allocation size must not be negative")
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        if caller is not None:
            origin = f"{caller.f_code.co_filename}:{caller.f_code.co_name}:{caller.f_lineno}"
        else:
            origin = "?:?:0"
        del frame, caller

        address = (self._next + _BLOCK_ALIGNMENT - 1) & ~(_BLOCK_ALIGNMENT - 1)
        self._next = address + max(size, 1)
        self._blocks[address] = bytearray(size)
        self._path(address).write_text(
            f"[+{origin}] --> addr:{address:#x}, size:{size}\n"
        )
        return address

    def free(self, address):
        """Release a block; raise :class:`DoubleFreeError` if it is not live."""
        try:
            self._path(address).unlink()
        except FileNotFoundError:
            raise DoubleFreeError(address) from None
        self._blocks.pop(address, None)

    def leaks(self):
        """Map each address with a record file left to its record line."""
        result = {}
        for path in sorted(self.directory.glob("*.mem")):
            try:
                address = int(path.stem, 16)
            except ValueError:
                continue
            result[address] = path.read_text().rstrip("\n")
        return result


def main(argv=None):
    """Allocate three blocks, free two and report what is left."""
    parser = argparse.ArgumentParser(
        prog="poolkit-leakcheck", description="Demonstrate leak tracking."
    )
    parser.add_argument("--directory", default="mem", help="where records are kept")
    args = parser.parse_args(argv)

    tracker = LeakTracker(args.directory)
    tracker.malloc(10)
    p2 = tracker.malloc(15)
    p3 = tracker.malloc(20)
    tracker.free(p2)
    tracker.free(p3)

    for record in tracker.leaks().values():
        print(record)
    return 0