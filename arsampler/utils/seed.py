# arsampler/utils/seed.py
from __future__ import annotations

from typing import Optional, Union

import numpy as np
from numpy.random import Generator, default_rng

SeedLike = Union[None, int, np.integer, Generator]


def resolve_rng(seed: SeedLike = None) -> Generator:
    """Return a numpy Generator; ints and None seed a fresh one, Generators pass through."""
    if isinstance(seed, Generator):
        return seed
    if seed is None or isinstance(seed, (int, np.integer)):
        return default_rng(seed)
    raise TypeError(f"Cannot build a random generator from {type(seed).__name__}")


def spawn_rngs(seed: Optional[int], count: int) -> list[Generator]:
    """Independent generators for repeated trials sharing one root seed."""
    root = np.random.SeedSequence(seed)
    return [default_rng(child) for child in root.spawn(count)]
