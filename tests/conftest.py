import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the CLI module for tests to avoid module-level import."""
    return importlib.import_module("main")


class StubVersion:
    """Version stand-in with a fixed capacity and count-field width."""

    def __init__(self, capacity_bits: int, count_width: int = 8):
        self.capacity_bits = capacity_bits
        self.count_width = count_width

    def total_capacity_bits(self) -> int:
        return self.capacity_bits

    def char_count_field_width(self, mode) -> int:
        return self.count_width

    def __repr__(self):
        return f"StubVersion({self.capacity_bits}, {self.count_width})"


@pytest.fixture()
def make_version():
    """Factory for versions with arbitrary capacity and count width."""
    return StubVersion


def bytes_of(bits, start: int, count: int) -> bytes:
    """Regroup ``count`` bytes of ``bits`` starting at bit ``start``."""
    out = bytearray()
    for i in range(count):
        value = 0
        for j in range(8):
            value = (value << 1) | int(bits[start + 8 * i + j])
        out.append(value)
    return bytes(out)


@pytest.fixture()
def bytes_of_fn():
    """Provide the bit-regrouping helper without importing conftest."""
    return bytes_of
