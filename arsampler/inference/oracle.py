"""Point evaluation of log f and its forward-difference derivative."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

import numpy as np

from arsampler.utils.config_parser import DEFAULT_DELTA

Array = np.ndarray


@dataclass
class DensityOracle:
    """Wrap a user density ``f`` and count how often it is evaluated.

    ``f`` returns the (unnormalised) density unless ``log_scale`` is set, in
    which case it already returns ``log f``. With ``vectorized`` the whole chunk
    is passed to ``f`` as one array; otherwise ``f`` is called per abscissa.
    """

    f: Callable[..., Any]
    args: Sequence[Any] = ()
    kwargs: Optional[Mapping[str, Any]] = None
    log_scale: bool = False
    vectorized: bool = False
    delta: float = DEFAULT_DELTA

    n_evaluations: int = field(default=0, init=False)

    def _call(self, x: Array) -> Array:
        kwargs = dict(self.kwargs or {})
        if self.vectorized:
            values = np.asarray(self.f(x, *self.args, **kwargs), dtype=float)
            values = np.broadcast_to(values, x.shape).astype(float)
        else:
            values = np.array([self.f(float(xi), *self.args, **kwargs) for xi in x], dtype=float)
        self.n_evaluations += int(x.size)
        return values

    def log_density(self, x) -> Array:
        """h(x) for every abscissa; non-finite entries are left for the caller to filter."""
        x = np.atleast_1d(np.asarray(x, dtype=float))
        values = self._call(x)
        if self.log_scale:
            return values
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(values)

    def log_density_derivative(self, x) -> Array:
        """Forward difference (h(x + delta) - h(x)) / delta."""
        _, dh = self.log_density_with_derivative(x)
        return dh

    def log_density_with_derivative(self, x) -> Tuple[Array, Array]:
        """``(h(x), h'(x))`` from the two evaluations at ``x`` and ``x + delta``."""
        x = np.atleast_1d(np.asarray(x, dtype=float))
        x_step = x + self.delta
        h = self.log_density(x)
        h_step = self.log_density(x_step)
        with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
            # divide by the representable increment, not the nominal mesh
            dh = (h_step - h) / (x_step - x)
        return h, dh

    def evaluate(self, x) -> Tuple[Array, Array, Array]:
        """Return ``(x, h, dh)`` restricted to abscissae where both are finite.

        Costs exactly two evaluations of ``f`` per abscissa.
        """
        x = np.atleast_1d(np.asarray(x, dtype=float))
        h, dh = self.log_density_with_derivative(x)
        keep = np.isfinite(h) & np.isfinite(dh)
        return x[keep], h[keep], dh[keep]


__all__ = ["DensityOracle"]
