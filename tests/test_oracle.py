from __future__ import annotations

import math

import numpy as np
import numpy.testing as npt

from arsampler.inference.oracle import DensityOracle


def _normal_kernel(x: float) -> float:
    return math.exp(-0.5 * x * x)


def test_log_density_and_forward_difference_derivative():
    oracle = DensityOracle(_normal_kernel)
    x = np.array([-2.0, -0.5, 0.0, 1.5])
    npt.assert_allclose(oracle.log_density(x), -0.5 * x**2, rtol=1e-12, atol=1e-12)
    npt.assert_allclose(oracle.log_density_derivative(x), -x, atol=1e-5)


def test_evaluate_costs_two_calls_per_point():
    oracle = DensityOracle(_normal_kernel)
    x, h, dh = oracle.evaluate([0.0, 1.0, 2.0])
    assert x.shape == h.shape == dh.shape == (3,)
    assert oracle.n_evaluations == 6


def test_evaluate_drops_non_finite_points():
    def ramp(x):
        return x if x > 0 else 0.0

    oracle = DensityOracle(ramp)
    x, h, dh = oracle.evaluate([-1.0, 0.5])
    npt.assert_array_equal(x, [0.5])
    npt.assert_allclose(h, [math.log(0.5)])
    npt.assert_allclose(dh, [2.0], rtol=1e-5)
    # the dropped point was still paid for
    assert oracle.n_evaluations == 4


def test_log_scale_with_extra_arguments():
    def log_kernel(x, mu, sigma=1.0):
        return -((x - mu) ** 2) / (2 * sigma**2)

    oracle = DensityOracle(log_kernel, args=(1.0,), kwargs={"sigma": 2.0}, log_scale=True)
    npt.assert_allclose(oracle.log_density([3.0]), [-0.5])
    npt.assert_allclose(oracle.log_density_derivative([3.0]), [-0.5], atol=1e-5)


def test_vectorized_oracle_receives_whole_chunk():
    shapes = []

    def log_kernel(x):
        shapes.append(np.shape(x))
        return -0.5 * np.asarray(x) ** 2

    oracle = DensityOracle(log_kernel, log_scale=True, vectorized=True)
    oracle.evaluate(np.linspace(-1.0, 1.0, 5))
    assert shapes == [(5,), (5,)]
    assert oracle.n_evaluations == 10


def test_linear_log_density_has_exact_derivative():
    oracle = DensityOracle(lambda x: -x, log_scale=True)
    x = np.array([0.3, 4.7, 9.1, 123.4])
    npt.assert_array_equal(oracle.log_density_derivative(x), -np.ones_like(x))
