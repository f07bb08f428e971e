"""
Distribution sampler built on top of a uniform random source.

This module provides the core sampling functionality: exponential, uniform
and Poisson variates derived from a stream of uniform draws in [0, 1).
"""

import math
import random
import hashlib
import numpy as np
from typing import Protocol, Union


# Rates at or above this use transformed rejection, below it the
# multiplicative method.
PTRS_THRESHOLD = 10.0

BACKENDS = ("python", "numpy")

_LOG_2PI_HALF = 0.5 * math.log(2 * math.pi)

# Coefficients of the Stirling series for log-gamma, lowest order first.
_LOGGAM_COEFFS = (
    8.333333333333333e-02, -2.777777777777778e-03,
    7.936507936507937e-04, -5.952380952380952e-04,
    8.417508417508418e-04, -1.917526917526918e-03,
    6.410256410256410e-03, -2.955065359477124e-02,
    1.796443723688307e-01, -1.39243221690590e+00,
)


class UniformSource(Protocol):
    """Anything that yields independent uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


class DistributionSampler:
    """
    Sampler for exponential, uniform and Poisson distributions.

    Every draw is taken from the wrapped source, so two samplers over
    identically seeded sources produce identical sequences. The sampler is
    not thread-safe; give each thread its own sampler and source.
    """

    def __init__(self, source: UniformSource):
        """
        Initialize the sampler.

        Args:
            source: Uniform random source, e.g. ``random.Random`` or
                ``numpy.random.Generator``
        """
        self._source = source

    @classmethod
    def from_seed(cls, seed: int, backend: str = "python") -> "DistributionSampler":
        """Create a sampler over a freshly seeded source."""
        return cls(make_source(seed, backend))

    @property
    def source(self) -> UniformSource:
        """The wrapped source, for callers that need its full API."""
        return self._source

    def exponential(self, scale: float) -> float:
        """
        Sample from an exponential distribution.

        Args:
            scale: Mean of the distribution, assumed positive

        Returns:
            Non-negative sample
        """
        return scale * self._standard_exponential()

    def uniform(self, loc: float, scale: float) -> float:
        """Sample uniformly from [loc, loc + scale)."""
        return loc + scale * self._source.random()

    def poisson(self, lam: float) -> int:
        """
        Sample from a Poisson distribution.

        Small rates are simulated directly by multiplying uniforms; large
        rates use the transformed rejection method with squeeze (Hormann,
        1993), which needs O(1) draws on average regardless of the rate.

        Args:
            lam: Rate of the distribution, assumed non-negative

        Returns:
            Non-negative integer sample
        """
        if lam >= PTRS_THRESHOLD:
            return self._poisson_ptrs(lam)
        elif lam == 0:
            return 0
        else:
            return self._poisson_mult(lam)

    def _standard_exponential(self) -> float:
        return -math.log(1.0 - self._source.random())

    def _poisson_mult(self, lam: float) -> int:
        enlam = math.exp(-lam)
        count = 0
        prod = 1.0
        while True:
            prod *= self._source.random()
            if prod > enlam:
                count += 1
            else:
                return count

    def _poisson_ptrs(self, lam: float) -> int:
        slam = math.sqrt(lam)
        loglam = math.log(lam)
        b = 0.931 + 2.53 * slam
        a = -0.059 + 0.02483 * b
        log_invalpha = math.log(1.1239 + 1.1328 / (b - 3.4))
        vr = 0.9277 - 3.6224 / (b - 2)

        while True:
            u = self._source.random() - 0.5
            v = self._source.random()
            us = 0.5 - abs(u)
            if us == 0.0:
                continue
            k = math.floor((2 * a / us + b) * u + lam + 0.43)

            # Squeeze: most candidates are accepted here.
            if us >= 0.07 and v <= vr:
                return k

            if k < 0 or (us < 0.013 and v > us):
                continue

            # math.log raises on 0; its limit is -inf
            log_v = math.log(v) if v > 0 else -math.inf
            lhs = log_v + log_invalpha - math.log(a / (us * us) + b)
            rhs = -lam + k * loglam - log_gamma(k + 1)
            if lhs <= rhs:
                return k


def log_gamma(x: float) -> float:
    """
    Natural log of the gamma function for x >= 1.

    Uses the Stirling asymptotic series. Arguments of 7 or less are shifted
    up by an integer amount first and the recurrence
    ``lgamma(x + 1) = log(x) + lgamma(x)`` is unwound afterwards.
    """
    if x == 1.0 or x == 2.0:
        return 0.0

    x0 = x
    n = 0
    if x <= 7.0:
        n = int(7 - x)
        x0 = x + n

    x2 = 1.0 / (x0 * x0)
    series = _LOGGAM_COEFFS[-1]
    for coeff in reversed(_LOGGAM_COEFFS[:-1]):
        series = series * x2 + coeff

    gl = series / x0 + _LOG_2PI_HALF + (x0 - 0.5) * math.log(x0) - x0
    for _ in range(n):
        gl -= math.log(x0 - 1.0)
        x0 -= 1.0
    return gl


def make_source(seed: int, backend: str = "python") -> Union[random.Random, np.random.Generator]:
    """
    Build a seeded uniform source.

    Args:
        seed: Non-negative integer seed
        backend: "python" for ``random.Random``, "numpy" for a PCG64
            ``numpy.random.Generator``

    Returns:
        Source suitable for DistributionSampler
    """
    if backend == "python":
        return random.Random(seed)
    if backend == "numpy":
        return np.random.default_rng(seed)
    raise ValueError(f"Unknown backend: {backend} (expected one of {', '.join(BACKENDS)})")


def derive_seed(base_seed: int, *parts) -> int:
    s = "|".join(str(p) for p in (base_seed, *parts)).encode()
    return int.from_bytes(hashlib.sha256(s).digest()[:8], "big")
