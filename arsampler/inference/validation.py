"""Precondition checks run before any sampling."""
from __future__ import annotations

import logging
import math
import numbers
import warnings
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from arsampler.errors import (
    BoundsWarning,
    InitialPointOutOfBounds,
    InvalidBounds,
    InvalidSampleSize,
    NotAFunction,
)

logger = logging.getLogger(__name__)


def _warn(msg: str) -> None:
    logger.warning(msg)
    warnings.warn(msg, BoundsWarning, stacklevel=4)


def check_callable(f: Any) -> None:
    if not callable(f):
        raise NotAFunction(f"f must be callable, got {type(f).__name__}")


def check_sample_size(n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 1:
        raise InvalidSampleSize(f"n must be a positive integer, got {n!r}")
    return int(n)


def normalise_bounds(bounds: Sequence[float]) -> Tuple[float, float]:
    """Return ``(lower, upper)``; equal bounds reset to the real line, reversed ones swap."""
    try:
        values = [float(b) for b in bounds]
    except TypeError as exc:
        raise InvalidBounds("bounds must be a sequence of two numbers") from exc
    except ValueError as exc:
        raise InvalidBounds(f"bounds must be numeric, got {bounds!r}") from exc
    if len(values) != 2:
        raise InvalidBounds(f"bounds must have exactly 2 elements, got {len(values)}")
    lower, upper = values
    if math.isnan(lower) or math.isnan(upper):
        raise InvalidBounds("bounds must not be NaN")
    if lower == upper:
        _warn(f"equal bounds ({lower}, {upper}); sampling on (-inf, inf) instead")
        return -math.inf, math.inf
    if lower > upper:
        _warn(f"bounds ({lower}, {upper}) are out of order; swapping them")
        return upper, lower
    return lower, upper


def default_initial_points(bounds: Tuple[float, float]) -> np.ndarray:
    lower, upper = bounds
    finite_lo, finite_hi = math.isfinite(lower), math.isfinite(upper)
    if finite_lo and finite_hi:
        width = upper - lower
        return np.array([lower + 0.25 * width, lower + 0.75 * width])
    if finite_lo:
        return np.array([lower + 0.5, lower + 1.5])
    if finite_hi:
        return np.array([upper - 1.5, upper - 0.5])
    return np.array([-1.0, 1.0])


def check_initial_points(x0: Optional[Sequence[float]], bounds: Tuple[float, float]) -> np.ndarray:
    if x0 is None:
        return default_initial_points(bounds)
    try:
        points = np.atleast_1d(np.asarray(x0, dtype=float)).ravel()
    except (TypeError, ValueError) as exc:
        raise InitialPointOutOfBounds(f"initial points must be numeric, got {x0!r}") from exc
    if points.size == 0:
        return default_initial_points(bounds)
    lower, upper = bounds
    outside = ~((points > lower) & (points < upper))
    if np.any(outside):
        raise InitialPointOutOfBounds(
            f"initial points {points[outside].tolist()} are not inside the bounds ({lower}, {upper})"
        )
    return points


__all__ = [
    "check_callable",
    "check_initial_points",
    "check_sample_size",
    "default_initial_points",
    "normalise_bounds",
]
