"""Piecewise-linear hulls of log f and the piecewise-exponential proposal.

Given support points ``x_1 < ... < x_n`` with values ``h_i = log f(x_i)`` and
slopes ``dh_i``, the upper hull is the minimum of the tangent lines and the
lower hull (squeeze) is the chord polygon through the points. The proposal
density is ``exp(upper hull)`` normalised over ``[lower, upper]``; its
per-segment masses drive segment selection and inverse-CDF sampling.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy.special import logsumexp

from arsampler.errors import UnboundedEnvelope, ZeroMassEnvelope

Array = np.ndarray
Bounds = Tuple[float, float]


@dataclass(frozen=True)
class Envelope:
    """Immutable snapshot of hulls and proposal built from one support set."""

    x: Array            # support abscissae, length n
    h: Array
    dh: Array
    z: Array            # tangent intersections, length n + 1, z[0]/z[-1] are the bounds
    upper_slope: Array  # m_u, length n
    upper_intercept: Array  # b_u
    lower_slope: Array  # m_l, length n - 1
    lower_intercept: Array  # b_l
    log_mass: Array     # log of the unnormalised segment integrals
    log_norm: float     # log Z
    log_beta: Array     # b_u - log Z
    weights: Array      # segment probabilities w_k

    @property
    def n_segments(self) -> int:
        return int(self.x.size)

    @property
    def beta(self) -> Array:
        with np.errstate(over="ignore"):
            return np.exp(self.log_beta)

    def upper(self, x, segment=None) -> Array:
        """Upper hull at ``x``; the owning segment is looked up when not given."""
        x = np.asarray(x, dtype=float)
        if segment is None:
            segment = self.segment_of(x)
        segment = np.asarray(segment, dtype=int)
        # h_k + m_k (x - x_k) avoids the cancellation in b_u + m_u x far from zero
        return self.h[segment] + self.upper_slope[segment] * (x - self.x[segment])

    def segment_of(self, x) -> Array:
        x = np.asarray(x, dtype=float)
        idx = np.searchsorted(self.z[1:-1], x, side="left")
        return np.clip(idx, 0, self.n_segments - 1)

    def chord_of(self, x) -> Array:
        """Index ``j`` of the chord ``[x_j, x_{j+1}]`` containing ``x``, -1 when none does."""
        x = np.asarray(x, dtype=float)
        n = self.n_segments
        j = np.searchsorted(self.x, x, side="right") - 1
        j = np.where(x == self.x[-1], n - 2, j)
        valid = (j >= 0) & (j < n - 1)
        return np.where(valid, j, -1)

    def lower(self, x) -> Array:
        """Lower hull at ``x``; ``-inf`` outside ``[x_min, x_max]``."""
        shape = np.shape(x)
        x = np.atleast_1d(np.asarray(x, dtype=float))
        j = self.chord_of(x)
        out = np.full(x.shape, -np.inf)
        ok = j >= 0
        if np.any(ok):
            jj = j[ok]
            x0, x1 = self.x[jj], self.x[jj + 1]
            h0, h1 = self.h[jj], self.h[jj + 1]
            xs = x[ok]
            out[ok] = ((x1 - xs) * h0 + (xs - x0) * h1) / (x1 - x0)
        return out.reshape(shape)


def compute_intercepts(x: Array, h: Array, dh: Array, bounds: Bounds) -> Array:
    """Abscissae where consecutive tangent lines intersect, framed by the bounds."""
    z = np.empty(x.size + 1)
    z[0], z[-1] = bounds
    if x.size > 1:
        z[1:-1] = (h[1:] - h[:-1] - x[1:] * dh[1:] + x[:-1] * dh[:-1]) / (dh[:-1] - dh[1:])
    return z


def tangent_lines(x: Array, h: Array, dh: Array) -> Tuple[Array, Array]:
    return dh.copy(), h - x * dh


def secant_lines(x: Array, h: Array) -> Tuple[Array, Array]:
    dx = np.diff(x)
    slope = np.diff(h) / dx
    intercept = (x[1:] * h[:-1] - x[:-1] * h[1:]) / dx
    return slope, intercept


def check_integrable(dh: Array, bounds: Bounds) -> None:
    """Raise ``UnboundedEnvelope`` unless exp(upper hull) has finite mass."""
    lower, upper = bounds
    if dh.size == 0:
        raise UnboundedEnvelope("no support points to build an envelope from")
    if not (np.isfinite(lower) or dh[0] > 0):
        raise UnboundedEnvelope(
            "lower bound is infinite and h'(x) at the leftmost point is not positive; "
            "choose initial points left of the mode or a finite lower bound"
        )
    if not (np.isfinite(upper) or dh[-1] < 0):
        raise UnboundedEnvelope(
            "upper bound is infinite and h'(x) at the rightmost point is not negative; "
            "choose initial points right of the mode or a finite upper bound"
        )


def segment_log_masses(x: Array, h: Array, dh: Array, z: Array) -> Array:
    """log of int_{z_k}^{z_{k+1}} exp(h_k + dh_k (t - x_k)) dt for every segment."""
    z_lo, z_hi = z[:-1], z[1:]
    width = z_hi - z_lo
    out = np.empty(x.size)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        for k in range(x.size):
            m = dh[k]
            if m > 0:
                # anchor at the right end: exp(u(z_hi)) (1 - exp(-m width)) / m
                top = h[k] + m * (z_hi[k] - x[k])
                out[k] = top + np.log1p(-np.exp(-m * width[k])) - np.log(m)
            elif m < 0:
                top = h[k] + m * (z_lo[k] - x[k])
                out[k] = top + np.log1p(-np.exp(m * width[k])) - np.log(-m)
            else:
                out[k] = h[k] + np.log(width[k])
    return out


def build_envelope(x: Array, h: Array, dh: Array, bounds: Bounds) -> Envelope:
    """Full rebuild of hulls and proposal from the current support set."""
    x = np.asarray(x, dtype=float)
    h = np.asarray(h, dtype=float)
    dh = np.asarray(dh, dtype=float)
    if x.size == 0:
        raise UnboundedEnvelope("no support points to build an envelope from")

    z = compute_intercepts(x, h, dh, bounds)
    # finite-difference slopes can push an intersection past a domain bound
    z[1:-1] = np.clip(z[1:-1], bounds[0], bounds[1])
    m_u, b_u = tangent_lines(x, h, dh)
    m_l, b_l = secant_lines(x, h)

    log_mass = segment_log_masses(x, h, dh, z)
    log_mass = np.where(np.isnan(log_mass), -np.inf, log_mass)
    if np.any(np.isposinf(log_mass)):
        raise UnboundedEnvelope("exp(upper hull) has infinite mass on some segment")
    if not np.any(np.isfinite(log_mass)):
        raise ZeroMassEnvelope("exp(upper hull) integrates to zero over the domain")

    log_norm = float(logsumexp(log_mass))
    if not np.isfinite(log_norm):
        raise ZeroMassEnvelope(f"invalid envelope normaliser log Z = {log_norm}")

    with np.errstate(over="ignore", under="ignore"):
        weights = np.exp(log_mass - log_norm)
    weights = np.where(np.isfinite(weights) & (weights > 0), weights, 0.0)
    total = weights.sum()
    if total <= 0:
        raise ZeroMassEnvelope("segment weights sum to zero")
    weights = weights / total

    return Envelope(
        x=x,
        h=h,
        dh=dh,
        z=z,
        upper_slope=m_u,
        upper_intercept=b_u,
        lower_slope=m_l,
        lower_intercept=b_l,
        log_mass=log_mass,
        log_norm=log_norm,
        log_beta=b_u - log_norm,
        weights=weights,
    )


__all__ = [
    "Envelope",
    "build_envelope",
    "check_integrable",
    "compute_intercepts",
    "secant_lines",
    "segment_log_masses",
    "tangent_lines",
]
