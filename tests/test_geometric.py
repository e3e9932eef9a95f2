import math

import numpy as np
import pytest

from renewal_sim import InvalidParameterError, geom_rp, studentize


@pytest.fixture(scope="module")
def geom_result():
    return geom_rp(0.6, 100, 2_000, rng=2024)


def test_theoretical_moments(geom_result):
    assert geom_result.mu == pytest.approx(0.4 / 0.6)
    assert geom_result.sigma == pytest.approx(math.sqrt(0.4 / 0.36))
    assert geom_result.lln_target == pytest.approx(1.5)


def test_law_of_large_numbers(geom_result):
    assert geom_result.sample.n == 2_000
    assert geom_result.lln_error < 0.05


def test_central_limit_theorem(geom_result):
    z = geom_result.z_scores
    assert abs(z.mean()) < 0.2
    assert 0.85 < z.std(ddof=1) < 1.15


def test_studentize_formula():
    z = studentize(np.array([150, 160]), horizon=100.0, mu=2.0 / 3.0, sigma=1.0)
    scale = math.sqrt(100.0 / (2.0 / 3.0) ** 3)
    np.testing.assert_allclose(z, [0.0, 10.0 / scale])


def test_geom_rp_rejects_degenerate_p():
    with pytest.raises(InvalidParameterError):
        geom_rp(1.0, 10, 10)
    with pytest.raises(InvalidParameterError):
        geom_rp(0.0, 10, 10)


def test_geom_rp_deterministic_under_seed():
    a = geom_rp(0.4, 20, 50, rng=5)
    b = geom_rp(0.4, 20, 50, rng=5)
    np.testing.assert_array_equal(a.sample.counts, b.sample.counts)
    assert a.mean_count == b.mean_count


@pytest.fixture(scope="module")
def long_horizon():
    return geom_rp(0.6, 1_000, 1_000, rng=7, max_draws=2_010)


def test_clt_kolmogorov_smirnov_at_long_horizon(long_horizon):
    ks = long_horizon.clt_check()
    assert 0.0 <= ks.statistic <= 1.0
    assert ks.pvalue > 0.01


def test_lln_tolerance_shrinks_with_replications(long_horizon):
    short = geom_rp(0.6, 1_000, 100, rng=7, max_draws=2_010)
    tolerances = []
    for res in (short, long_horizon):
        # 4 standard errors of mean(N(T))/T from the renewal CLT, plus room for the O(1/T) bias
        se = res.sigma * math.sqrt(res.horizon / res.mu**3) / math.sqrt(res.sample.n) / res.horizon
        tol = 4.0 * se + 0.005
        assert res.lln_error < tol
        tolerances.append(tol)
    assert tolerances[1] < tolerances[0]


def test_single_replication_has_nan_spread():
    res = geom_rp(0.5, 10, 1, rng=0)
    assert math.isnan(res.std_count)
