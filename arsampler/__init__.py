"""Adaptive rejection sampling for univariate log-concave densities."""
from __future__ import annotations

from arsampler.errors import (
    AllInitialPointsInvalid,
    ARSError,
    ARSWarning,
    BoundsWarning,
    InitialPointOutOfBounds,
    InvalidBounds,
    InvalidInput,
    InvalidSampleSize,
    MaxIterationsExceeded,
    NotAFunction,
    NotLogConcave,
    OutOfBoundsWarning,
    UnboundedEnvelope,
    ZeroMassEnvelope,
)
from arsampler.inference.ars import AdaptiveRejectionSampler, SamplingReport, sample
from arsampler.utils.config_parser import ARSConfig

__version__ = "0.1.0"

__all__ = [
    "sample",
    "AdaptiveRejectionSampler",
    "ARSConfig",
    "SamplingReport",
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
