"""
Random variate sampling for simulation code.

This module provides exponential, uniform and Poisson samplers driven by a
pluggable uniform random source, plus string-driven distribution specs
for configuring sampling runs.
"""

from .sampler import DistributionSampler, UniformSource, make_source, derive_seed, PTRS_THRESHOLD
from .distributions import (
    Distribution,
    ExponentialDistribution,
    UniformDistribution,
    PoissonDistribution,
    summarize,
)
from .config import SamplingConfig

__all__ = [
    'DistributionSampler',
    'UniformSource',
    'make_source',
    'derive_seed',
    'PTRS_THRESHOLD',
    'Distribution',
    'ExponentialDistribution',
    'UniformDistribution',
    'PoissonDistribution',
    'summarize',
    'SamplingConfig',
]
