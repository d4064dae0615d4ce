"""Adaptive rejection sampling (Gilks & Wild, 1992) for log-concave densities.

The sampler keeps a sorted set of support points of ``h = log f``. Candidates
are drawn in chunks of quadratically growing size from ``exp(upper hull)``;
candidates passing the squeeze test are accepted without touching ``f``, the
others are evaluated in one bulk oracle call, tested against ``h`` and folded
back into the support set, after which the hulls are rebuilt.
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.random import Generator

from arsampler.errors import AllInitialPointsInvalid, ARSError, MaxIterationsExceeded
from arsampler.inference.envelope import Envelope, build_envelope, check_integrable
from arsampler.inference.oracle import DensityOracle
from arsampler.inference.rejection import RejectionOutcome, RejectionTester
from arsampler.inference.segments import SegmentSampler
from arsampler.inference.support import SupportStore
from arsampler.inference.validation import (
    check_callable,
    check_initial_points,
    check_sample_size,
    normalise_bounds,
)
from arsampler.utils.config_parser import ARSConfig
from arsampler.utils.logging_utils import Timer, progress
from arsampler.utils.seed import SeedLike, resolve_rng

logger = logging.getLogger(__name__)

ConfigLike = Union[None, ARSConfig, Mapping[str, Any]]


class RunStatus(str, Enum):
    GROWING = "growing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SamplingReport:
    """Counters describing one call to :meth:`AdaptiveRejectionSampler.draw`."""

    n_requested: int = 0
    n_iterations: int = 0
    n_candidates: int = 0
    n_accepted: int = 0
    n_squeeze_accepted: int = 0
    n_full_tests: int = 0
    n_full_accepted: int = 0
    n_out_of_bounds: int = 0
    n_oracle_evaluations: int = 0
    n_support_points: int = 0
    status: str = RunStatus.GROWING.value

    @property
    def acceptance_rate(self) -> float:
        if self.n_candidates == 0:
            return float("nan")
        return self.n_accepted / self.n_candidates

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["acceptance_rate"] = self.acceptance_rate
        return out


@dataclass
class BatchState:
    """Mutable loop state scoped to a single draw."""

    target: int
    iteration: int = 0
    chunks: List[np.ndarray] = field(default_factory=list)
    n_accepted: int = 0
    warned_out_of_bounds: bool = False
    status: RunStatus = RunStatus.GROWING
    report: SamplingReport = field(default_factory=SamplingReport)

    def next_chunk_size(self) -> int:
        return min(self.target - self.n_accepted, self.iteration ** 2)

    def record(self, chunk_size: int, outcome: RejectionOutcome) -> None:
        if outcome.n_accepted:
            self.chunks.append(outcome.accepted)
        self.n_accepted += outcome.n_accepted
        r = self.report
        r.n_candidates += chunk_size
        r.n_squeeze_accepted += outcome.n_squeeze_accepted
        r.n_full_tests += outcome.n_full_tests
        r.n_full_accepted += outcome.n_full_accepted
        r.n_out_of_bounds += outcome.n_out_of_bounds

    def samples(self) -> np.ndarray:
        if not self.chunks:
            return np.empty(0)
        # chunks overshoot the target, keep exactly `target` values
        return np.concatenate(self.chunks)[: self.target]


@dataclass
class AdaptiveRejectionSampler:
    """Adaptive rejection sampler for a univariate log-concave density.

    Parameters
    ----------
    f : callable
        Unnormalised density ``f(x, *args, **kwargs)``; with ``log_scale=True`` it
        returns ``log f`` instead.
    bounds : pair of float
        Domain ``(lower, upper)``; either end may be infinite.
    x0 : sequence of float, optional
        Initial abscissae strictly inside the bounds. Defaults to two points
        placed according to which bounds are finite.
    seed : int or numpy.random.Generator, optional
        Source of every random draw.

    The support set and envelope persist across :meth:`draw` calls on the same
    instance, so later draws start from an already refined envelope.
    """

    f: Callable[..., Any]
    bounds: Sequence[float] = (-math.inf, math.inf)
    x0: Optional[Sequence[float]] = None
    args: Sequence[Any] = ()
    kwargs: Optional[Mapping[str, Any]] = None
    log_scale: bool = False
    vectorized: bool = False
    config: ARSConfig = field(default_factory=ARSConfig)
    seed: SeedLike = None

    # Runtime state (accessible after draw)
    rng: Generator = field(init=False, repr=False)
    bounds_: Tuple[float, float] = field(init=False)
    x0_: np.ndarray = field(init=False, repr=False)
    oracle_: DensityOracle = field(init=False, repr=False)
    support_: SupportStore = field(init=False, repr=False)
    envelope_: Optional[Envelope] = field(default=None, init=False, repr=False)
    report_: Optional[SamplingReport] = field(default=None, init=False)
    _stale: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        check_callable(self.f)
        if not isinstance(self.config, ARSConfig):
            self.config = ARSConfig.from_mapping(self.config)
        self.bounds_ = normalise_bounds(self.bounds)
        self.x0_ = check_initial_points(self.x0, self.bounds_)
        self.rng = resolve_rng(self.seed)
        self.oracle_ = DensityOracle(
            self.f,
            args=tuple(self.args),
            kwargs=self.kwargs,
            log_scale=self.log_scale,
            vectorized=self.vectorized,
            delta=self.config.delta,
        )
        self.support_ = SupportStore(eps=self.config.eps, delta=self.config.delta)

    # ----------
    # Envelope maintenance
    # ----------
    def initialize(self) -> Envelope:
        """Evaluate the initial points, validate them and build the first envelope."""
        x, h, dh = self.oracle_.evaluate(self.x0_)
        if x.size == 0:
            raise AllInitialPointsInvalid(
                f"log f or its derivative is non-finite at every initial point {self.x0_.tolist()}"
            )
        dropped = self.x0_.size - x.size
        if dropped:
            logger.info("dropped %d initial point(s) with non-finite log density", dropped)
        self.support_.merge_and_validate(x, h, dh)
        check_integrable(self.support_.dh, self.bounds_)
        return self._rebuild()

    def _rebuild(self) -> Envelope:
        self.envelope_ = build_envelope(*self.support_.snapshot(), self.bounds_)
        self._stale = False
        return self.envelope_

    # ----------
    # API
    # ----------
    def draw(self, n: int) -> np.ndarray:
        """Draw exactly ``n`` independent samples."""
        n = check_sample_size(n)
        state = BatchState(target=n)
        state.report.n_requested = n
        evaluations_before = self.oracle_.n_evaluations
        bar = progress(total=n, desc="ARS", enabled=self.config.show_progress)
        try:
            with Timer(name=f"ars draw n={n}", logger=logger):
                if self.envelope_ is None:
                    self.initialize()
                self._run(state, bar)
        except ARSError:
            state.status = RunStatus.FAILED
            raise
        finally:
            bar.close()
            state.report.status = state.status.value
            state.report.n_accepted = min(state.n_accepted, n)
            state.report.n_iterations = state.iteration
            state.report.n_oracle_evaluations = self.oracle_.n_evaluations - evaluations_before
            state.report.n_support_points = len(self.support_)
            self.report_ = state.report

        logger.info(
            "drew %d samples in %d iterations (%d candidates, %d full tests, %d support points)",
            n,
            state.iteration,
            state.report.n_candidates,
            state.report.n_full_tests,
            len(self.support_),
        )
        return state.samples()

    def _run(self, state: BatchState, bar) -> None:
        max_iters = int(self.config.max_iters)
        while state.n_accepted < state.target:
            state.iteration += 1
            if state.iteration > max_iters:
                raise MaxIterationsExceeded(
                    f"accepted {state.n_accepted}/{state.target} samples after {max_iters} iterations"
                )
            chunk = state.next_chunk_size()
            if self._stale:
                self._rebuild()

            batch = SegmentSampler(self.envelope_, self.rng).draw(chunk)
            tester = RejectionTester(
                self.envelope_,
                self.oracle_,
                self.bounds_,
                warned_out_of_bounds=state.warned_out_of_bounds,
            )
            outcome = tester.test(batch)
            state.warned_out_of_bounds = tester.warned_out_of_bounds
            state.record(chunk, outcome)
            bar.update(outcome.n_accepted)

            if outcome.new_x.size:
                self.support_.merge_and_validate(outcome.new_x, outcome.new_h, outcome.new_dh)
                self._stale = True

            logger.debug(
                "iter %d: chunk=%d accepted=%d (squeeze %d, full %d/%d) total=%d/%d support=%d",
                state.iteration,
                chunk,
                outcome.n_accepted,
                outcome.n_squeeze_accepted,
                outcome.n_full_accepted,
                outcome.n_full_tests,
                state.n_accepted,
                state.target,
                len(self.support_),
            )
        state.status = RunStatus.DONE


def sample(
    f: Callable[..., Any],
    n: int,
    x0: Optional[Sequence[float]] = None,
    bounds: Sequence[float] = (-math.inf, math.inf),
    *,
    args: Sequence[Any] = (),
    kwargs: Optional[Mapping[str, Any]] = None,
    log_scale: bool = False,
    vectorized: bool = False,
    rng: SeedLike = None,
    config: ConfigLike = None,
) -> np.ndarray:
    """Draw ``n`` samples from the log-concave density ``f`` on ``bounds``.

    Examples
    --------
    >>> from scipy.stats import norm
    >>> draws = sample(norm.pdf, 500, x0=(-1.0, 1.0), rng=0)
    >>> draws.shape
    (500,)
    """
    check_callable(f)
    n = check_sample_size(n)
    sampler = AdaptiveRejectionSampler(
        f,
        bounds=bounds,
        x0=x0,
        args=args,
        kwargs=kwargs,
        log_scale=log_scale,
        vectorized=vectorized,
        config=config if isinstance(config, ARSConfig) else ARSConfig.from_mapping(config),
        seed=rng,
    )
    return sampler.draw(n)


__all__ = [
    "AdaptiveRejectionSampler",
    "BatchState",
    "RunStatus",
    "SamplingReport",
    "sample",
]
