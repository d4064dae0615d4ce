"""Two-stage squeeze / full acceptance test for a batch of candidates."""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from arsampler.errors import OutOfBoundsWarning
from arsampler.inference.envelope import Envelope
from arsampler.inference.oracle import DensityOracle
from arsampler.inference.segments import CandidateBatch

Array = np.ndarray

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RejectionOutcome:
    accepted: Array
    new_x: Array
    new_h: Array
    new_dh: Array
    n_squeeze_accepted: int
    n_full_tests: int
    n_full_accepted: int
    n_out_of_bounds: int

    @property
    def n_accepted(self) -> int:
        return int(self.accepted.size)


@dataclass
class RejectionTester:
    """Classify candidates against one envelope snapshot.

    Only candidates failing the squeeze (or lying outside the chord polygon)
    reach the oracle, and all of them are returned as new support points.
    """

    envelope: Envelope
    oracle: DensityOracle
    bounds: Tuple[float, float]
    warned_out_of_bounds: bool = field(default=False)

    def _drop_out_of_bounds(self, batch: CandidateBatch) -> Tuple[CandidateBatch, int]:
        lower, upper = self.bounds
        inside = (batch.x >= lower) & (batch.x <= upper)
        n_out = int(inside.size - np.count_nonzero(inside))
        if n_out and not self.warned_out_of_bounds:
            msg = (
                f"{n_out} candidate(s) fell outside the bounds {self.bounds}; "
                "the bounds may understate the support of the density"
            )
            logger.warning(msg)
            warnings.warn(msg, OutOfBoundsWarning, stacklevel=3)
            self.warned_out_of_bounds = True
        if n_out == 0:
            return batch, 0
        return CandidateBatch(
            x=batch.x[inside], segment=batch.segment[inside], uniform=batch.uniform[inside]
        ), n_out

    def test(self, batch: CandidateBatch) -> RejectionOutcome:
        batch, n_out = self._drop_out_of_bounds(batch)
        x, w = batch.x, batch.uniform
        upper = self.envelope.upper(x, batch.segment)

        # candidates outside [x_min, x_max] have no chord and skip the squeeze
        has_chord = self.envelope.chord_of(x) >= 0
        with np.errstate(over="ignore", invalid="ignore"):
            lower = self.envelope.lower(x)
            squeezed = has_chord & (w <= np.exp(lower - upper))

        pending = ~squeezed
        x_full = x[pending]
        if x_full.size:
            # one bulk oracle call per chunk
            h_full, dh_full = self.oracle.log_density_with_derivative(x_full)
        else:
            h_full, dh_full = np.empty(0), np.empty(0)
        with np.errstate(over="ignore", invalid="ignore"):
            full_ok = np.isfinite(h_full) & (w[pending] <= np.exp(h_full - upper[pending]))

        accepted = np.concatenate([x[squeezed], x_full[full_ok]])
        finite = np.isfinite(h_full) & np.isfinite(dh_full)
        return RejectionOutcome(
            accepted=accepted,
            new_x=x_full[finite],
            new_h=h_full[finite],
            new_dh=dh_full[finite],
            n_squeeze_accepted=int(np.count_nonzero(squeezed)),
            n_full_tests=int(x_full.size),
            n_full_accepted=int(np.count_nonzero(full_ok)),
            n_out_of_bounds=n_out,
        )


__all__ = ["RejectionOutcome", "RejectionTester"]
