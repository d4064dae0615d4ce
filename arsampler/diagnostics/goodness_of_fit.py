"""Goodness-of-fit checks comparing sampler output with reference draws."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np
from numpy.random import Generator
from scipy.stats import ks_2samp

from arsampler.utils.seed import spawn_rngs

Array = np.ndarray


@dataclass(frozen=True)
class KSResult:
    statistic: float
    pvalue: float
    alpha: float = 0.05

    @property
    def passed(self) -> bool:
        """True when the two-sample test does not reject equality at ``alpha``."""
        return self.pvalue > self.alpha


def ks_two_sample(samples: Array, reference: Array, alpha: float = 0.05) -> KSResult:
    samples = np.asarray(samples, dtype=float).ravel()
    reference = np.asarray(reference, dtype=float).ravel()
    if samples.size == 0 or reference.size == 0:
        raise ValueError("both samples must be non-empty")
    res = ks_2samp(samples, reference)
    return KSResult(statistic=float(res.statistic), pvalue=float(res.pvalue), alpha=alpha)


def ks_pass_rate(
    draw: Callable[[Generator], Array],
    reference: Callable[[Generator], Array],
    *,
    trials: int = 10,
    seed: Optional[int] = 0,
    alpha: float = 0.05,
) -> float:
    """Fraction of repeated trials in which the KS test does not reject.

    ``draw`` and ``reference`` each receive their own generator per trial.
    """
    if trials < 1:
        raise ValueError("trials must be >= 1")
    rngs = spawn_rngs(seed, 2 * trials)
    passed = 0
    for t in range(trials):
        result = ks_two_sample(draw(rngs[2 * t]), reference(rngs[2 * t + 1]), alpha=alpha)
        passed += int(result.passed)
    return passed / trials


def summarize_fit(samples: Array, reference: Array, alpha: float = 0.05) -> Dict[str, float]:
    samples = np.asarray(samples, dtype=float)
    reference = np.asarray(reference, dtype=float)
    ks = ks_two_sample(samples, reference, alpha=alpha)
    return {
        "mean": float(np.mean(samples)),
        "reference_mean": float(np.mean(reference)),
        "var": float(np.var(samples, ddof=1)) if samples.size > 1 else float("nan"),
        "reference_var": float(np.var(reference, ddof=1)) if reference.size > 1 else float("nan"),
        "ks_statistic": ks.statistic,
        "ks_pvalue": ks.pvalue,
    }
