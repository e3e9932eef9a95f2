import numpy as np
import pytest

from renewal_sim import InvalidParameterError, ReplicationSample, pmf_table, poisson_pmf, summarize


def test_pmf_table_fills_gaps():
    sample = ReplicationSample([0, 2, 2, 3], horizon=1.0)
    df = pmf_table(sample)
    assert list(df.columns) == ["k", "count", "empirical"]
    assert list(df["k"]) == [0, 1, 2, 3]
    assert list(df["count"]) == [1, 0, 2, 1]
    assert df["empirical"].sum() == pytest.approx(1.0)


def test_pmf_table_with_theoretical_column():
    sample = ReplicationSample([1, 2, 2, 3], horizon=2.0)
    df = pmf_table(sample, theoretical=lambda k: poisson_pmf(k, 1.0, 2.0))
    np.testing.assert_allclose(df["theoretical"], poisson_pmf(np.arange(4), 1.0, 2.0))
    np.testing.assert_allclose(df["abs_diff"], (df["empirical"] - df["theoretical"]).abs())
    # the sample itself is untouched
    assert list(sample.counts) == [1, 2, 2, 3]


def test_summarize_with_rate():
    sample = ReplicationSample([9, 10, 11, 10], horizon=5.0)
    out = summarize(sample, rate=2.0)
    assert out["n"] == 4
    assert out["mean"] == pytest.approx(10.0)
    assert out["expected_mean"] == pytest.approx(10.0)
    assert out["rel_error"] == pytest.approx(0.0)
    assert out["variance"] == pytest.approx(2.0 / 3.0)


def test_summarize_single_observation_has_nan_spread():
    out = summarize(ReplicationSample([4], horizon=1.0))
    assert np.isnan(out["variance"])
    assert "expected_mean" not in out


def test_summarize_rejects_bad_rate():
    with pytest.raises(InvalidParameterError):
        summarize(ReplicationSample([1, 2], horizon=1.0), rate=0.0)
