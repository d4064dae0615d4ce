from __future__ import annotations

import math
import warnings

import numpy as np
import numpy.testing as npt
import pytest

from arsampler.errors import OutOfBoundsWarning
from arsampler.inference.envelope import build_envelope
from arsampler.inference.oracle import DensityOracle
from arsampler.inference.rejection import RejectionTester
from arsampler.inference.segments import CandidateBatch

INF = math.inf


def _log_normal_kernel(x):
    return -0.5 * np.asarray(x) ** 2


def _setup(bounds=(-INF, INF)):
    x = np.array([-1.0, 0.0, 1.0])
    env = build_envelope(x, -0.5 * x**2, -x, bounds)
    oracle = DensityOracle(_log_normal_kernel, log_scale=True, vectorized=True)
    return RejectionTester(env, oracle, bounds), env, oracle


def _batch(env, x, w):
    x = np.asarray(x, dtype=float)
    return CandidateBatch(x=x, segment=env.segment_of(x), uniform=np.asarray(w, dtype=float))


def test_squeeze_accepts_without_oracle_calls():
    tester, env, oracle = _setup()
    outcome = tester.test(_batch(env, [0.5, -0.3], [0.0, 0.0]))
    npt.assert_array_equal(np.sort(outcome.accepted), [-0.3, 0.5])
    assert outcome.n_squeeze_accepted == 2
    assert outcome.n_full_tests == 0
    assert outcome.new_x.size == 0
    assert oracle.n_evaluations == 0


def test_points_outside_chords_go_to_full_test_and_become_support():
    tester, env, oracle = _setup()
    outcome = tester.test(_batch(env, [3.0], [0.0]))
    npt.assert_array_equal(outcome.accepted, [3.0])
    assert outcome.n_full_tests == 1
    assert outcome.n_full_accepted == 1
    npt.assert_array_equal(outcome.new_x, [3.0])
    npt.assert_allclose(outcome.new_h, [-4.5])
    npt.assert_allclose(outcome.new_dh, [-3.0], atol=1e-5)
    assert oracle.n_evaluations == 2


def test_full_test_rejection_still_refines_support():
    tester, env, oracle = _setup()
    # squeeze: exp(l - u) ~ 0.86, full: exp(h - u) ~ 0.96
    outcome = tester.test(_batch(env, [0.3], [0.99]))
    assert outcome.n_accepted == 0
    assert outcome.n_full_tests == 1
    assert outcome.n_full_accepted == 0
    npt.assert_array_equal(outcome.new_x, [0.3])


def test_full_test_accepts_between_squeeze_and_density():
    tester, env, _ = _setup()
    outcome = tester.test(_batch(env, [0.3], [0.9]))
    npt.assert_array_equal(outcome.accepted, [0.3])
    assert outcome.n_squeeze_accepted == 0
    assert outcome.n_full_accepted == 1


def test_non_finite_density_is_rejected_and_not_added():
    x = np.array([-1.0, 0.0, 1.0])
    env = build_envelope(x, -0.5 * x**2, -x, (-INF, INF))

    def clipped(x):
        x = np.asarray(x, dtype=float)
        return np.where(x > 2.0, -np.inf, -0.5 * x**2)

    oracle = DensityOracle(clipped, log_scale=True, vectorized=True)
    outcome = RejectionTester(env, oracle, (-INF, INF)).test(_batch(env, [2.5], [0.0]))
    assert outcome.n_accepted == 0
    assert outcome.n_full_tests == 1
    assert outcome.new_x.size == 0


def test_out_of_bounds_candidates_are_dropped_with_single_warning():
    tester, env, _ = _setup(bounds=(-2.0, 2.0))
    with pytest.warns(OutOfBoundsWarning):
        outcome = tester.test(_batch(env, [5.0, 0.5], [0.0, 0.0]))
    assert outcome.n_out_of_bounds == 1
    npt.assert_array_equal(outcome.accepted, [0.5])
    assert tester.warned_out_of_bounds

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        again = tester.test(_batch(env, [-7.0], [0.0]))
    assert again.n_out_of_bounds == 1
    assert not any(issubclass(w.category, OutOfBoundsWarning) for w in caught)
