import numpy as np
import pytest

from randdist import (
    Distribution,
    DistributionSampler,
    ExponentialDistribution,
    PoissonDistribution,
    UniformDistribution,
    summarize,
)
from randdist.distributions import POISSON_LAM_MAX, DistributionType


@pytest.mark.parametrize("spec, cls", [
    ("P(4.5)", PoissonDistribution),
    ("P(0)", PoissonDistribution),
    ("E(2)", ExponentialDistribution),
    ("E(1e-3)", ExponentialDistribution),
    ("U(0,10)", UniformDistribution),
    ("U(-2.5, 0.5)", UniformDistribution),
])
def test_from_string_dispatches_on_type(spec, cls):
    assert isinstance(Distribution.from_string(spec), cls)


def test_registry_covers_every_type():
    assert set(Distribution._registry) == {t.value for t in DistributionType}


def test_parsed_parameters():
    uniform = Distribution.from_string("U(-2.5, 0.5)")
    assert uniform.loc == -2.5
    assert uniform.scale == 0.5
    assert Distribution.from_string("P(12)").lam == 12.0
    assert Distribution.from_string("E(.25)").scale == 0.25


@pytest.mark.parametrize("spec", ["P(4.5)", "P(10)", "E(2)", "U(0,10)", "U(-1,0.1)"])
def test_to_string_round_trips(spec):
    assert Distribution.from_string(spec).to_string() == spec


@pytest.mark.parametrize("spec, message", [
    ("", "cannot be empty"),
    ("N(1,2)", "Unknown distribution type"),
    ("P(abc)", "Invalid distribution format"),
    ("P(1,2)", "Invalid distribution format"),
    ("U(1)", "Invalid distribution format"),
    ("E(2", "Invalid distribution format"),
    ("E(0)", "must be positive"),
    ("E(-1)", "must be positive"),
    ("U(0,-3)", "must be positive"),
    ("P(-0.5)", "must be non-negative"),
    ("P(1e400)", "must be finite"),
    ("P(1e19)", "too large"),
])
def test_invalid_specs_raise(spec, message):
    with pytest.raises(ValueError, match=message):
        Distribution.from_string(spec)


def test_equality_uses_normalized_string():
    assert Distribution.from_string("P(10)") == PoissonDistribution(10.0)
    assert Distribution.from_string("E(2)") != Distribution.from_string("E(3)")
    assert len({Distribution.from_string("U(0,1)"), UniformDistribution(0, 1)}) == 1


def test_theoretical_moments():
    assert PoissonDistribution(7).mean() == 7
    assert PoissonDistribution(7).variance() == 7
    assert ExponentialDistribution(3).variance() == 9
    assert UniformDistribution(2, 6).mean() == 5
    assert UniformDistribution(2, 6).variance() == 3


def test_sample_delegates_to_sampler():
    a = DistributionSampler.from_seed(5)
    b = DistributionSampler.from_seed(5)
    assert PoissonDistribution(30).sample(a) == b.poisson(30)
    assert ExponentialDistribution(2).sample(a) == b.exponential(2)
    assert UniformDistribution(1, 2).sample(a) == b.uniform(1, 2)


def test_sample_batch_dtypes():
    sampler = DistributionSampler.from_seed(11)
    counts = PoissonDistribution(3).sample_batch(sampler, 100)
    waits = ExponentialDistribution(1).sample_batch(sampler, 100)
    assert counts.shape == (100,)
    assert counts.dtype == np.int64
    assert waits.dtype == np.float64


def test_summarize_reports_empirical_and_expected():
    dist = PoissonDistribution(25)
    samples = dist.sample_batch(DistributionSampler.from_seed(8, "numpy"), 10000)
    stats = summarize(samples, dist)
    assert stats["count"] == 10000
    assert stats["expected_mean"] == 25
    assert stats["expected_variance"] == 25
    assert stats["mean"] == pytest.approx(25, rel=0.03)
    assert stats["variance"] == pytest.approx(25, rel=0.08)
    assert stats["min"] >= 0
    assert stats["min"] <= stats["mean"] <= stats["max"]


def test_summarize_rejects_empty():
    with pytest.raises(ValueError):
        summarize(np.array([]), PoissonDistribution(1))


def test_largest_poisson_rate_fits_int64():
    assert PoissonDistribution(POISSON_LAM_MAX).lam == POISSON_LAM_MAX
    assert POISSON_LAM_MAX < np.iinfo(np.int64).max
