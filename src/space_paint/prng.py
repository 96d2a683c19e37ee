"""Mulberry32 seeded pseudo-random generator.

Every random decision in a scene flows from one 32-bit seed through this
module. The sequence is a pure function of the seed and the number of draws:
no time, no OS entropy, no global state.

Two layers:
    - seed_state() / next_state(): the pure 32-bit step, state in -> (value, state) out
    - Mulberry32: a handle threading that state through the derived draws
      used by the sampler and the layer generator

Draw accounting (part of the reproducibility contract):
    next, next_int, next_float, next_boolean, choice, weighted_index -> 1 draw
    point_in_circle, point_in_rect                                    -> 2 draws
    shuffle(seq)                                                      -> len(seq) - 1 draws

Usage:
    from src.space_paint.prng import create_random

    rng = create_random(1337)
    x = rng.next_float(0, 800)
"""

from __future__ import annotations

import itertools
import math
from typing import Sequence, TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0

DEFAULT_SEED = 1337


def seed_state(seed: int) -> int:
    """Reduce any integer seed to a 32-bit state (negative seeds wrap)."""
    return int(seed) & MASK32


def next_state(state: int) -> tuple[float, int]:
    """Advance the generator one step.

    Parameters
    ----------
    state : int
        Current 32-bit state

    Returns
    -------
    tuple[float, int]
        (value in [0, 1), next state)
    """
    state = (state + _INCREMENT) & MASK32
    t = ((state ^ (state >> 15)) * (1 | state)) & MASK32
    t = ((t + (((t ^ (t >> 7)) * (61 | t)) & MASK32)) & MASK32) ^ t
    return ((t ^ (t >> 14)) & MASK32) / _TWO_POW_32, state


class Mulberry32:
    """Stateful handle over the pure Mulberry32 step.

    Attributes
    ----------
    seed : int
        Seed the handle was created from (as given)
    state : int
        Current 32-bit state
    draws : int
        Number of next() calls consumed so far
    """

    __slots__ = ("seed", "_state", "_draws")

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed
        self._state = seed_state(seed)
        self._draws = 0

    @property
    def state(self) -> int:
        return self._state

    @property
    def draws(self) -> int:
        return self._draws

    def next(self) -> float:
        """Next float in [0, 1)."""
        value, self._state = next_state(self._state)
        self._draws += 1
        return value

    def next_int(self, min_value: int, max_value: int) -> int:
        """Integer in [min_value, max_value) (floor-scaled)."""
        return math.floor(self.next() * (max_value - min_value)) + min_value

    def next_float(self, min_value: float, max_value: float) -> float:
        """Float in [min_value, max_value)."""
        return self.next() * (max_value - min_value) + min_value

    def next_boolean(self) -> bool:
        return self.next() < 0.5

    def choice(self, seq: Sequence[T]) -> T:
        """Uniform element of a non-empty sequence (one draw)."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.next_int(0, len(seq))]

    def weighted_index(self, weights: Sequence[float]) -> int:
        """Index drawn proportionally to non-negative weights (one draw).

        Raises
        ------
        ValueError
            If weights is empty or sums to zero
        """
        cumulative = list(itertools.accumulate(weights))
        if not cumulative or cumulative[-1] <= 0:
            raise ValueError(f"weights must contain a positive entry, got {list(weights)}")

        # left-to-right float sums; sum() compensates on 3.12+
        r = self.next() * cumulative[-1]
        for i, bound in enumerate(cumulative):
            if r < bound:
                return i
        # r can land on total through float rounding
        return max(i for i, w in enumerate(weights) if w > 0)

    def shuffle(self, seq: Sequence[T]) -> list[T]:
        """Fisher-Yates shuffle into a new list, last index to first.

        The input is left untouched; consumes len(seq) - 1 draws.
        """
        items = list(seq)
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(0, i + 1)
            items[i], items[j] = items[j], items[i]
        return items

    def point_in_circle(self, radius: float) -> tuple[float, float]:
        """Uniform-by-area offset within a disk centered on the origin.

        Angle first, then radius as sqrt(u) * radius.
        """
        angle = self.next_float(0, math.pi * 2)
        r = math.sqrt(self.next()) * radius
        return math.cos(angle) * r, math.sin(angle) * r

    def point_in_rect(self, width: float, height: float) -> tuple[float, float]:
        """Uniform point in [0, width) x [0, height), x drawn first."""
        return self.next_float(0, width), self.next_float(0, height)

    def __repr__(self) -> str:
        return f"Mulberry32(seed={self.seed}, state=0x{self._state:08x}, draws={self._draws})"


def create_random(seed: int = DEFAULT_SEED) -> Mulberry32:
    """Create a fresh generator for ``seed``."""
    return Mulberry32(seed)
