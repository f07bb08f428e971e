"""
Distribution specs for string-driven sampling.

Mirrors the scenario strings used by benchmarking tools: a one-letter type
followed by parenthesized parameters, e.g. "P(4.5)", "E(2)" or "U(0,10)".
Each spec draws its samples through a DistributionSampler.
"""

import re
import math
import numpy as np
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Tuple, Type, Union

from .sampler import DistributionSampler


_NUMBER = r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?\s*"

# Largest rate whose samples stay within int64 with overwhelming probability.
POISSON_LAM_MAX = float(np.iinfo(np.int64).max - np.sqrt(np.iinfo(np.int64).max) * 10)


class DistributionType(Enum):
    """Distribution types for spec strings."""
    EXPONENTIAL = "E"
    UNIFORM = "U"
    POISSON = "P"


class Distribution(ABC):
    """
    Abstract base class for sampleable distribution specs.

    Subclasses register themselves by their type letter so that
    ``Distribution.from_string`` can dispatch on the first character.
    """

    _registry: Dict[str, Type["Distribution"]] = {}
    distribution_type: DistributionType
    validation_pattern: str
    dtype: Any = np.float64

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._registry[cls.distribution_type.value] = cls

    @abstractmethod
    def sample(self, sampler: DistributionSampler) -> Union[float, int]:
        """Draw a single value using the given sampler."""
        pass

    @abstractmethod
    def mean(self) -> float:
        pass

    @abstractmethod
    def variance(self) -> float:
        pass

    @abstractmethod
    def to_string(self) -> str:
        """Convert spec back to string representation."""
        pass

    @classmethod
    @abstractmethod
    def parse(cls, params_str: str) -> "Distribution":
        """Parse spec parameters from string."""
        pass

    def sample_batch(self, sampler: DistributionSampler, size: int) -> np.ndarray:
        """
        Draw ``size`` values in sequence.

        Args:
            sampler: Sampler to draw from
            size: Number of samples

        Returns:
            1-D array of samples, int64 for discrete distributions
        """
        samples = np.empty(size, dtype=self.dtype)
        for i in range(size):
            samples[i] = self.sample(sampler)
        return samples

    @classmethod
    def from_string(cls, spec_str: str) -> "Distribution":
        """
        Factory method to create a spec from a string.

        Args:
            spec_str: String like "P(4.5)", "E(2)" or "U(0,10)"

        Returns:
            Distribution instance
        """
        spec_str = spec_str.strip() if spec_str else spec_str
        cls.validate(spec_str)
        return cls._registry[spec_str[0]].parse(spec_str[1:])

    @classmethod
    def validate(cls, spec_str: str) -> bool:
        """Validate spec string format."""
        if not spec_str:
            raise ValueError("Distribution string cannot be empty")

        type_identifier = spec_str[0]
        if type_identifier not in cls._registry:
            raise ValueError(f"Unknown distribution type: {type_identifier}")

        pattern = cls._registry[type_identifier].validation_pattern
        if not re.match(pattern, spec_str):
            raise ValueError(f"Invalid distribution format: {spec_str}")

        return True

    def __eq__(self, other):
        if not isinstance(other, Distribution):
            return NotImplemented
        return self.to_string() == other.to_string()

    def __hash__(self):
        return hash(self.to_string())

    def __repr__(self):
        return f"{type(self).__name__}({self.to_string()!r})"


class ExponentialDistribution(Distribution):
    """Exponential spec: E(scale)"""

    distribution_type = DistributionType.EXPONENTIAL
    validation_pattern = rf"^E\({_NUMBER}\)$"

    def __init__(self, scale: float):
        if not scale > 0:
            raise ValueError(f"Exponential scale must be positive, got {scale}")
        self.scale = float(scale)

    def sample(self, sampler: DistributionSampler) -> float:
        return sampler.exponential(self.scale)

    def mean(self) -> float:
        return self.scale

    def variance(self) -> float:
        return self.scale ** 2

    def to_string(self) -> str:
        return f"E({_format_number(self.scale)})"

    @classmethod
    def parse(cls, params_str: str) -> "ExponentialDistribution":
        """Parse E(scale) format."""
        (scale,) = _parse_numbers(params_str)
        return cls(scale)


class UniformDistribution(Distribution):
    """Uniform spec over [loc, loc + scale): U(loc,scale)"""

    distribution_type = DistributionType.UNIFORM
    validation_pattern = rf"^U\({_NUMBER},{_NUMBER}\)$"

    def __init__(self, loc: float, scale: float):
        if not scale > 0:
            raise ValueError(f"Uniform scale must be positive, got {scale}")
        self.loc = float(loc)
        self.scale = float(scale)

    def sample(self, sampler: DistributionSampler) -> float:
        return sampler.uniform(self.loc, self.scale)

    def mean(self) -> float:
        return self.loc + self.scale / 2

    def variance(self) -> float:
        return self.scale ** 2 / 12

    def to_string(self) -> str:
        return f"U({_format_number(self.loc)},{_format_number(self.scale)})"

    @classmethod
    def parse(cls, params_str: str) -> "UniformDistribution":
        """Parse U(loc,scale) format."""
        loc, scale = _parse_numbers(params_str)
        return cls(loc, scale)


class PoissonDistribution(Distribution):
    """Poisson spec: P(lam)"""

    distribution_type = DistributionType.POISSON
    validation_pattern = rf"^P\({_NUMBER}\)$"
    dtype = np.int64

    def __init__(self, lam: float):
        if not lam >= 0:
            raise ValueError(f"Poisson rate must be non-negative, got {lam}")
        if lam > POISSON_LAM_MAX:
            raise ValueError(f"Poisson rate is too large, got {lam} (maximum {POISSON_LAM_MAX:g})")
        self.lam = float(lam)

    def sample(self, sampler: DistributionSampler) -> int:
        return sampler.poisson(self.lam)

    def mean(self) -> float:
        return self.lam

    def variance(self) -> float:
        return self.lam

    def to_string(self) -> str:
        return f"P({_format_number(self.lam)})"

    @classmethod
    def parse(cls, params_str: str) -> "PoissonDistribution":
        """Parse P(lam) format."""
        (lam,) = _parse_numbers(params_str)
        return cls(lam)


def summarize(samples: np.ndarray, distribution: Distribution) -> Dict[str, float]:
    """
    Compare empirical moments of ``samples`` with the distribution's own.

    Args:
        samples: Samples drawn from ``distribution``
        distribution: Spec the samples were drawn from

    Returns:
        Dictionary of count, empirical and theoretical statistics
    """
    if len(samples) == 0:
        raise ValueError("Cannot summarize an empty sample")

    return {
        "count": int(len(samples)),
        "mean": float(np.mean(samples)),
        "variance": float(np.var(samples)),
        "min": float(np.min(samples)),
        "max": float(np.max(samples)),
        "expected_mean": distribution.mean(),
        "expected_variance": distribution.variance(),
    }


def _parse_numbers(params_str: str) -> Tuple[float, ...]:
    values = tuple(float(p) for p in params_str.strip().strip("()").split(","))
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"Distribution parameters must be finite: {params_str}")
    return values


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)
