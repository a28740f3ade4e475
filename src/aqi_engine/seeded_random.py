"""Deterministic pseudo-random streams keyed by station id."""
from __future__ import annotations

from typing import Callable

from aqi_engine.config import RANDOM_STATE

_MASK_32 = 0xFFFFFFFF
_WEYL_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK_32


def create_generator(seed: int) -> Callable[[], float]:
    """Return a Mulberry32 stream for ``seed``.

    Every call advances the 32-bit state by a Weyl increment and mixes it with
    xor-shifts and multiplies, yielding floats in ``[0, 1)``. The stream is a
    pure function of the seed.
    """
    state = seed & _MASK_32

    def _next() -> float:
        nonlocal state
        state = (state + _WEYL_INCREMENT) & _MASK_32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK_32
        return ((t ^ (t >> 14)) & _MASK_32) / 4294967296

    return _next


def station_seed(station_id: str, random_state: int = RANDOM_STATE) -> int:
    return random_state + sum(ord(char) for char in station_id)
