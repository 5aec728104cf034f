"""
Seeded pseudo-random numbers for daily selection.

xmur3 turns a string into a 32-bit seed, mulberry32 turns the seed into a
repeatable stream of floats in [0, 1). Both reproduce the 32-bit wraparound
arithmetic of the browser client exactly, so a date string yields the same
draws on every platform.
"""

from __future__ import annotations

from typing import List

_MASK32 = 0xFFFFFFFF
_TWO_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low 32 bits as unsigned."""
    return (a * b) & _MASK32


def _utf16_code_units(text: str) -> List[int]:
    raw = text.encode("utf-16-le", "surrogatepass")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def hash_to_seed(text: str) -> int:
    """xmur3 hash of ``text``, returned as an unsigned 32-bit integer."""
    units = _utf16_code_units(text)
    h = (1779033703 ^ len(units)) & _MASK32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK32

    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    h ^= h >> 16
    return h & _MASK32


class SeededGenerator:
    """mulberry32 with its 32-bit state held explicitly."""

    def __init__(self, seed: int):
        self.state = seed & _MASK32

    def next(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & _MASK32
        s = self.state
        t = _imul(s ^ (s >> 15), s | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_32

    __call__ = next

    def take(self, n: int) -> List[float]:
        return [self.next() for _ in range(n)]


def make_generator(seed: int) -> SeededGenerator:
    return SeededGenerator(seed)


def generator_for(text: str) -> SeededGenerator:
    """Shortcut for ``make_generator(hash_to_seed(text))``."""
    return SeededGenerator(hash_to_seed(text))
