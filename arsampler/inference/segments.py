"""Vectorised draws from the piecewise-exponential proposal exp(upper hull)."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.random import Generator

from arsampler.inference.envelope import Envelope

Array = np.ndarray


@dataclass(frozen=True)
class CandidateBatch:
    x: Array        # proposed abscissae
    segment: Array  # upper-hull segment each candidate was drawn from
    uniform: Array  # acceptance uniforms, one per candidate

    def __len__(self) -> int:
        return int(self.x.size)


def invert_segment_cdf(envelope: Envelope, segment: Array, u: Array) -> Array:
    """Map uniforms to abscissae through the exponential CDF of each segment.

    On segment ``k`` with slope ``m`` the proposal is proportional to
    ``exp(m t)`` on ``[z_k, z_{k+1}]``; its inverse CDF is
    ``z_k + log1p(u * expm1(m * width)) / m``. Segments with ``m > 0`` are
    inverted from the right end so an infinite left end stays finite.
    """
    m = envelope.upper_slope[segment]
    z_lo = envelope.z[segment]
    z_hi = envelope.z[segment + 1]
    width = z_hi - z_lo

    x = np.empty(segment.shape, dtype=float)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        flat = m == 0
        x[flat] = z_lo[flat] + u[flat] * width[flat]

        neg = m < 0
        x[neg] = z_lo[neg] + np.log1p(u[neg] * np.expm1(m[neg] * width[neg])) / m[neg]

        pos = m > 0
        x[pos] = z_hi[pos] + np.log1p(u[pos] * np.expm1(-m[pos] * width[pos])) / m[pos]
    return x


@dataclass
class SegmentSampler:
    """Draw candidates from one envelope snapshot."""

    envelope: Envelope
    rng: Generator

    def draw_segments(self, count: int) -> Array:
        return self.rng.choice(self.envelope.n_segments, size=count, p=self.envelope.weights)

    def draw(self, count: int) -> CandidateBatch:
        segment = self.draw_segments(count)
        u = self.rng.random(count)
        x = invert_segment_cdf(self.envelope, segment, u)
        return CandidateBatch(x=x, segment=segment, uniform=self.rng.random(count))


__all__ = ["CandidateBatch", "SegmentSampler", "invert_segment_cdf"]
