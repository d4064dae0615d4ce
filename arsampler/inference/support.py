"""Sorted store of support points (x, h, h') used to build the hulls."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from arsampler.errors import NotLogConcave
from arsampler.utils.config_parser import DEFAULT_DELTA, DEFAULT_EPS

Array = np.ndarray

logger = logging.getLogger(__name__)


def _first_close_pair(x: Array, dh: Array, eps: float, delta: float) -> int:
    """Index of the first point (never 0) too close to its left neighbour, or -1."""
    close = (np.abs(np.diff(dh)) <= eps) | (np.abs(np.diff(x)) <= delta)
    hits = np.flatnonzero(close)
    if hits.size == 0:
        return -1
    return int(hits[0]) + 1


@dataclass
class SupportStore:
    eps: float = DEFAULT_EPS
    delta: float = DEFAULT_DELTA

    x: Array = field(default_factory=lambda: np.empty(0), init=False)
    h: Array = field(default_factory=lambda: np.empty(0), init=False)
    dh: Array = field(default_factory=lambda: np.empty(0), init=False)

    def __len__(self) -> int:
        return int(self.x.size)

    def snapshot(self) -> Tuple[Array, Array, Array]:
        return self.x.copy(), self.h.copy(), self.dh.copy()

    def merge_and_validate(self, x_new, h_new, dh_new) -> int:
        """Insert new points, drop near duplicates and check log-concavity.

        Returns the number of points that survived de-duplication.
        """
        x = np.concatenate([self.x, np.asarray(x_new, dtype=float).ravel()])
        h = np.concatenate([self.h, np.asarray(h_new, dtype=float).ravel()])
        dh = np.concatenate([self.dh, np.asarray(dh_new, dtype=float).ravel()])
        before = len(self)

        order = np.argsort(x, kind="stable")
        x, h, dh = x[order], h[order], dh[order]

        # The left point of a too-close pair is always the one kept.
        while x.size > 1:
            idx = _first_close_pair(x, dh, self.eps, self.delta)
            if idx < 0:
                break
            x, h, dh = np.delete(x, idx), np.delete(h, idx), np.delete(dh, idx)

        if x.size > 1:
            steps = np.diff(dh)
            bad = np.flatnonzero(steps >= -self.eps)
            if bad.size:
                i = int(bad[0])
                raise NotLogConcave(
                    "log density derivative is not decreasing: "
                    f"h'({x[i]:.6g})={dh[i]:.6g} <= h'({x[i + 1]:.6g})={dh[i + 1]:.6g}"
                )

        self.x, self.h, self.dh = x, h, dh
        added = len(self) - before
        logger.debug("support points: %d (+%d)", len(self), added)
        return added
