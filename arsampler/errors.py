"""Exceptions and warnings raised by the adaptive rejection sampler."""
from __future__ import annotations


class ARSError(Exception):
    """Base class for every hard failure of a sampling run."""


class InvalidInput(ARSError, ValueError):
    """Malformed arguments detected before any sampling."""


class NotAFunction(InvalidInput, TypeError):
    pass


class InvalidBounds(InvalidInput):
    pass


class InitialPointOutOfBounds(InvalidInput):
    pass


class InvalidSampleSize(InvalidInput):
    pass


class NotLogConcave(ARSError):
    """Derivatives of log f are not strictly decreasing across support points."""


class UnboundedEnvelope(ARSError):
    """exp(upper hull) is not integrable over the domain."""


class ZeroMassEnvelope(ARSError):
    """exp(upper hull) integrates to zero."""


class AllInitialPointsInvalid(ARSError):
    """log f or its derivative is non-finite at every initial point."""


class MaxIterationsExceeded(ARSError, RuntimeError):
    pass


class ARSWarning(UserWarning):
    pass


class OutOfBoundsWarning(ARSWarning):
    """Candidates fell outside the domain; the supplied bounds understate the support."""


class BoundsWarning(ARSWarning):
    """Bounds were repaired (swapped or reset) during validation."""


__all__ = [
    "ARSError",
    "InvalidInput",
    "NotAFunction",
    "InvalidBounds",
    "InitialPointOutOfBounds",
    "InvalidSampleSize",
    "NotLogConcave",
    "UnboundedEnvelope",
    "ZeroMassEnvelope",
    "AllInitialPointsInvalid",
    "MaxIterationsExceeded",
    "ARSWarning",
    "OutOfBoundsWarning",
    "BoundsWarning",
]
