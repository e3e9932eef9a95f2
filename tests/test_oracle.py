import math

import numpy as np
import pytest

from renewal_sim import InvalidParameterError, estimate_distribution, poisson_chisquare, poisson_pmf


@pytest.fixture(scope="module")
def poisson_sample():
    # rate 2, horizon 5: N(T) ~ Poisson(10)
    return estimate_distribution("exponential", {"rate": 2.0}, 5.0, 10_000, rng=12345)


def test_poisson_pmf_closed_form():
    assert poisson_pmf(0, 2.0, 5.0) == pytest.approx(math.exp(-10.0))
    assert poisson_pmf(10, 2.0, 5.0) == pytest.approx(math.exp(-10.0) * 10**10 / math.factorial(10))
    pmf = poisson_pmf(np.arange(200), 2.0, 5.0)
    assert pmf.sum() == pytest.approx(1.0)


def test_poisson_pmf_rejects_bad_rate():
    with pytest.raises(InvalidParameterError):
        poisson_pmf(1, 0.0, 5.0)


def test_exponential_mean_matches_rate_times_horizon(poisson_sample):
    assert abs(poisson_sample.mean - 10.0) / 10.0 < 0.05
    assert poisson_sample.variance == pytest.approx(10.0, rel=0.1)


def test_exponential_pmf_matches_poisson(poisson_sample):
    res = poisson_chisquare(poisson_sample, rate=2.0)
    assert not res.rejects(alpha=0.01)
    assert res.dof == len(res.bins) - 1
    assert all(e >= 5.0 for e in res.expected)
    assert sum(res.observed) == pytest.approx(10_000)
    assert sum(res.expected) == pytest.approx(10_000)


def test_chisquare_detects_wrong_rate():
    sample = estimate_distribution("exponential", {"rate": 3.0}, 5.0, 2_000, rng=1)
    assert poisson_chisquare(sample, rate=2.0).rejects(alpha=0.01)


def test_chisquare_on_plain_counts_requires_horizon():
    with pytest.raises(InvalidParameterError):
        poisson_chisquare([9, 10, 11], rate=2.0)


def test_chisquare_too_few_replications():
    with pytest.raises(InvalidParameterError):
        poisson_chisquare([9, 10, 11], rate=2.0, horizon=5.0)


def test_chisquare_rejects_fractional_counts():
    counts = np.random.default_rng(0).poisson(10.0, size=1_000) + 0.9
    with pytest.raises(InvalidParameterError):
        poisson_chisquare(counts, rate=2.0, horizon=5.0)
