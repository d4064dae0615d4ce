"""Distributional checks of sampler output against scipy reference generators."""
from __future__ import annotations

import numpy as np
import pytest

from arsampler import sample
from arsampler.densities import DENSITIES, get_density, log_concave_names
from arsampler.diagnostics.goodness_of_fit import ks_pass_rate, ks_two_sample, summarize_fit

N_DRAWS = 1000
TRIALS = 5


def test_log_concave_registry_covers_reference_families():
    names = set(log_concave_names())
    assert {"normal", "exponential", "gamma", "uniform", "logistic", "beta", "chi2", "weibull"} <= names
    assert not {"cauchy", "student_t", "pareto", "lognormal", "f"} & names


@pytest.mark.parametrize("name", log_concave_names())
def test_ks_two_sample_against_reference(name):
    density = get_density(name)

    def draw(rng):
        return sample(density.log_pdf, N_DRAWS, rng=rng, **density.sampler_kwargs())

    def reference(rng):
        return density.reference(rng, N_DRAWS)

    rate = ks_pass_rate(draw, reference, trials=TRIALS, seed=2024)
    assert rate >= 0.6


@pytest.mark.parametrize(
    "name,params",
    [("normal", {"loc": 5.0, "scale": 2.0}), ("gamma", {"a": 7.5, "scale": 0.5}), ("beta", {"a": 1.0, "b": 4.0})],
)
def test_parameterised_densities_match_moments(name, params):
    density = get_density(name, params)
    rng = np.random.default_rng(17)
    draws = sample(density.log_pdf, 4000, rng=rng, **density.sampler_kwargs())
    summary = summarize_fit(draws, density.reference(rng, 4000))
    sd = np.sqrt(summary["reference_var"])
    assert abs(summary["mean"] - density.dist.mean()) < 0.1 * sd + 4 * sd / np.sqrt(4000)
    assert 0.8 < summary["var"] / density.dist.var() < 1.2


def test_ks_two_sample_detects_shifted_samples():
    rng = np.random.default_rng(0)
    result = ks_two_sample(rng.normal(size=500), rng.normal(loc=1.0, size=500))
    assert not result.passed
    assert 0.0 <= result.statistic <= 1.0


def test_unknown_density_name():
    with pytest.raises(KeyError):
        get_density("not-a-density")


def test_non_log_concave_parameters_are_refused():
    with pytest.raises(ValueError):
        get_density("gamma", {"a": 0.5})
    assert "weibull" in DENSITIES
