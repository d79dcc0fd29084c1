"""Seeded pseudo-random stream (Park-Miller minimal standard LCG).

Two streams built from the same seed yield the same draws forever, which is
what level replay and the tests rely on. ``fresh_seed`` is the only
non-deterministic entry point and is never called from the generation core.
"""

from __future__ import annotations

import math
import secrets

MODULUS = 2147483647  # 2**31 - 1
MULTIPLIER = 16807
MAX_SEED = MODULUS - 1


class SeededRandom:
    """Single-owner draw stream. Not safe to share between threads."""

    def __init__(self, seed: int):
        # Truncated remainder: the sign follows the dividend, so -5 -> 2147483641.
        s = abs(int(seed)) % MODULUS
        if seed < 0:
            s = -s
        if s <= 0:
            s += MAX_SEED
        self._seed = s

    @property
    def state(self) -> int:
        return self._seed

    def draw(self) -> float:
        """Advance the stream and return a float in [0, 1)."""
        self._seed = (self._seed * MULTIPLIER) % MODULUS
        return (self._seed - 1) / MAX_SEED

    def draw_int(self, lo: int, hi: int) -> int:
        """Inclusive integer in [lo, hi]."""
        if lo > hi:
            raise ValueError(f"draw_int requires lo <= hi, got lo={lo} hi={hi}")
        return math.floor(self.draw() * (hi - lo + 1)) + lo


def fresh_seed() -> int:
    """Entropy-backed seed in [1, 2147483646] for brand new games."""
    return secrets.randbelow(MAX_SEED) + 1
