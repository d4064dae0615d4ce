"""Named example densities with scipy reference generators.

Each entry bundles a log density suitable for :func:`arsampler.sample`, the
domain and initial points that bracket its mode, and a reference sampler used
for goodness-of-fit comparisons. Densities flagged ``log_concave=False`` are
kept to exercise the log-concavity check.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import numpy as np
from numpy.random import Generator
from scipy import stats


@dataclass(frozen=True)
class ExampleDensity:
    name: str
    dist: Any  # frozen scipy.stats distribution
    bounds: Tuple[float, float]
    x0: Tuple[float, ...]
    log_concave: bool = True

    def log_pdf(self, x):
        return self.dist.logpdf(x)

    def reference(self, rng: Generator, size: int) -> np.ndarray:
        return np.asarray(self.dist.rvs(size=size, random_state=rng), dtype=float)

    def sampler_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for :func:`arsampler.sample` (log scale, vectorised)."""
        return {
            "x0": self.x0,
            "bounds": self.bounds,
            "log_scale": True,
            "vectorized": True,
        }


def _normal(loc: float = 0.0, scale: float = 1.0) -> ExampleDensity:
    return ExampleDensity("normal", stats.norm(loc, scale), (-math.inf, math.inf),
                          (loc - scale, loc + scale))


def _exponential(scale: float = 1.0) -> ExampleDensity:
    return ExampleDensity("exponential", stats.expon(scale=scale), (0.0, math.inf),
                          (0.5 * scale, 1.5 * scale))


def _gamma(a: float = 3.0, scale: float = 1.0) -> ExampleDensity:
    if a < 1:
        raise ValueError("gamma is log-concave only for shape a >= 1")
    mean = a * scale
    return ExampleDensity("gamma", stats.gamma(a, scale=scale), (0.0, math.inf),
                          (0.5 * mean, 1.5 * mean))


def _uniform(low: float = 0.0, high: float = 1.0) -> ExampleDensity:
    width = high - low
    return ExampleDensity("uniform", stats.uniform(low, width), (low, high),
                          (low + 0.25 * width, low + 0.75 * width))


def _logistic(loc: float = 0.0, scale: float = 1.0) -> ExampleDensity:
    return ExampleDensity("logistic", stats.logistic(loc, scale), (-math.inf, math.inf),
                          (loc - 2.0 * scale, loc + 2.0 * scale))


def _beta(a: float = 2.0, b: float = 3.0) -> ExampleDensity:
    if a < 1 or b < 1:
        raise ValueError("beta is log-concave only for a >= 1 and b >= 1")
    return ExampleDensity("beta", stats.beta(a, b), (0.0, 1.0), (0.25, 0.75))


def _chi2(df: float = 4.0) -> ExampleDensity:
    if df < 2:
        raise ValueError("chi-square is log-concave only for df >= 2")
    return ExampleDensity("chi2", stats.chi2(df), (0.0, math.inf), (0.5 * df, 1.5 * df))


def _weibull(c: float = 1.5, scale: float = 1.0) -> ExampleDensity:
    if c < 1:
        raise ValueError("weibull is log-concave only for shape c >= 1")
    return ExampleDensity("weibull", stats.weibull_min(c, scale=scale), (0.0, math.inf),
                          (0.5 * scale, 1.5 * scale))


def _cauchy() -> ExampleDensity:
    return ExampleDensity("cauchy", stats.cauchy(), (-math.inf, math.inf), (-1.0, 1.0),
                          log_concave=False)


def _student_t(df: float = 3.0) -> ExampleDensity:
    return ExampleDensity("student_t", stats.t(df), (-math.inf, math.inf), (-1.0, 1.0),
                          log_concave=False)


def _pareto(b: float = 3.0) -> ExampleDensity:
    return ExampleDensity("pareto", stats.pareto(b), (1.0, math.inf), (1.5, 2.5),
                          log_concave=False)


def _lognormal(s: float = 1.0) -> ExampleDensity:
    return ExampleDensity("lognormal", stats.lognorm(s), (0.0, math.inf), (2.0, 4.0),
                          log_concave=False)


def _f_dist(dfn: float = 5.0, dfd: float = 5.0) -> ExampleDensity:
    return ExampleDensity("f", stats.f(dfn, dfd), (0.0, math.inf), (1.0, 3.0),
                          log_concave=False)


DENSITIES: Dict[str, Callable[..., ExampleDensity]] = {
    "normal": _normal,
    "exponential": _exponential,
    "gamma": _gamma,
    "uniform": _uniform,
    "logistic": _logistic,
    "beta": _beta,
    "chi2": _chi2,
    "weibull": _weibull,
    "cauchy": _cauchy,
    "student_t": _student_t,
    "pareto": _pareto,
    "lognormal": _lognormal,
    "f": _f_dist,
}


def get_density(name: str, params: Optional[Mapping[str, Any]] = None) -> ExampleDensity:
    key = name.lower()
    if key not in DENSITIES:
        raise KeyError(f"Unknown density '{name}'. Available: {sorted(DENSITIES)}")
    return DENSITIES[key](**dict(params or {}))


def log_concave_names() -> list[str]:
    return [name for name, build in DENSITIES.items() if build().log_concave]


__all__ = ["DENSITIES", "ExampleDensity", "get_density", "log_concave_names"]
