import itertools
import random
import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def cannata():
    """Symbols with frequencies A=3, N=2, C=1, T=1."""
    return list("CANNATA")


def random_inputs(count=25, seed=1234):
    """Return ``count`` random non-empty symbol lists over small alphabets."""
    rng = random.Random(seed)
    inputs = []
    for _ in range(count):
        alphabet = rng.sample("abcdefghijklmnopqrstuvwxyz", rng.randint(1, 12))
        weights = [rng.randint(1, 50) for _ in alphabet]
        length = rng.randint(1, 300)
        inputs.append(rng.choices(alphabet, weights=weights, k=length))
    return inputs


@pytest.fixture()
def random_inputs_fn():
    """
    Fixture that provides the random_inputs helper without importing conftest.
    """
    return random_inputs


def is_prefix_free(codes):
    """Return ``True`` if no code in ``codes`` is a prefix of another."""
    for (a, code_a), (b, code_b) in itertools.permutations(codes.items(), 2):
        if code_b[:len(code_a)] == code_a:
            return False
    return True


@pytest.fixture()
def is_prefix_free_fn():
    return is_prefix_free


class FailingSink:
    """Sink that fails on the ``fail_on``-th call of ``write_bits``/``flush``."""

    def __init__(self, fail_write_at=None, fail_flush=False):
        self.bits = []
        self.writes = 0
        self.fail_write_at = fail_write_at
        self.fail_flush = fail_flush

    def write_bits(self, bits):
        self.writes += 1
        if self.writes == self.fail_write_at:
            raise OSError("disk full")
        self.bits.extend(bits)

    def flush(self):
        if self.fail_flush:
            raise OSError("flush failed")


@pytest.fixture()
def failing_sink_cls():
    return FailingSink
