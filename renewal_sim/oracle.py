"""Closed-form check for the Poisson process.

With i.i.d. Exponential(λ) interarrival times, N(T) ~ Poisson(λT):

    P(N(T) = k) = e^{-λT} (λT)^k / k!

This module is only a validation oracle for simulated samples.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np
from scipy.stats import chisquare, poisson

from .errors import InvalidParameterError
from .stats import Counts, ReplicationSample, _as_counts

# Config
DEFAULT_MIN_EXPECTED = 5.0


def _check_positive(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"{name} must be finite and > 0, got {value}")
    return value


def poisson_pmf(k: Union[int, np.ndarray], rate: float, horizon: float) -> Union[float, np.ndarray]:
    """Poisson(λT) probability of exactly ``k`` arrivals by time T."""
    mu = _check_positive("rate", rate) * _check_positive("horizon", horizon)
    out = poisson.pmf(k, mu)
    return float(out) if np.ndim(out) == 0 else out


@dataclass(frozen=True)
class ChiSquareResult:
    statistic: float
    pvalue: float
    dof: int
    bins: Tuple[Tuple[int, int], ...]  # (first k, last k) per pooled bin; last bin is open-ended
    observed: Tuple[float, ...]
    expected: Tuple[float, ...]

    def rejects(self, alpha: float = 0.01) -> bool:
        return self.pvalue < alpha


def _pool_bins(
    observed: np.ndarray, expected: np.ndarray, min_expected: float
) -> Tuple[List[float], List[float], List[Tuple[int, int]]]:
    """Merge adjacent bins, left to right, until each expected count reaches ``min_expected``.

    A trailing remainder that never reaches the threshold is folded into the last bin.
    """
    obs_out: List[float] = []
    exp_out: List[float] = []
    bins: List[Tuple[int, int]] = []
    acc_o, acc_e, start = 0.0, 0.0, 0

    for k, (o, e) in enumerate(zip(observed, expected)):
        acc_o += o
        acc_e += e
        if acc_e >= min_expected:
            obs_out.append(acc_o)
            exp_out.append(acc_e)
            bins.append((start, k))
            acc_o, acc_e, start = 0.0, 0.0, k + 1

    last_k = len(observed) - 1
    if start <= last_k:
        if bins:
            obs_out[-1] += acc_o
            exp_out[-1] += acc_e
            bins[-1] = (bins[-1][0], last_k)
        else:
            obs_out.append(acc_o)
            exp_out.append(acc_e)
            bins.append((start, last_k))
    return obs_out, exp_out, bins


def poisson_chisquare(
    sample: Counts,
    rate: float,
    horizon: Optional[float] = None,
    min_expected: float = DEFAULT_MIN_EXPECTED,
) -> ChiSquareResult:
    """Chi-square goodness of fit of replicated counts against Poisson(λT).

    Parameters
    ----------
    sample : ReplicationSample or array-like of int
        Counts N(T). The horizon is read from a ``ReplicationSample``.
    rate : float
        Interarrival rate λ.
    horizon : float, optional
        T; required when ``sample`` is a plain array.
    min_expected : float, optional
        Minimum expected count per pooled bin, by default 5.

    Returns
    -------
    ChiSquareResult
        Statistic, p-value and the pooled bins. The upper tail P(N > k_max)
        is included in the last bin so expected counts sum to n.
    """
    if horizon is None:
        if not isinstance(sample, ReplicationSample):
            raise InvalidParameterError("horizon is required when sample is not a ReplicationSample")
        horizon = sample.horizon
    mu = _check_positive("rate", rate) * _check_positive("horizon", horizon)
    counts = _as_counts(sample)
    n = counts.size

    k_max = max(int(counts.max()), int(poisson.ppf(1.0 - 1e-12, mu)))
    ks = np.arange(k_max + 1)
    probs = poisson.pmf(ks, mu)
    probs[-1] += poisson.sf(k_max, mu)
    observed = np.bincount(counts, minlength=k_max + 1).astype(float)
    expected = n * probs

    obs_pooled, exp_pooled, bins = _pool_bins(observed, expected, float(min_expected))
    if len(bins) < 2:
        raise InvalidParameterError(
            f"only {len(bins)} bin(s) reach an expected count of {min_expected}; add replications"
        )
    if len(bins) < 4:
        warnings.warn(
            f"chi-square test pooled down to {len(bins)} bins; the test has little power",
            RuntimeWarning,
            stacklevel=2,
        )

    f_obs = np.asarray(obs_pooled)
    f_exp = np.asarray(exp_pooled)
    # guard against rounding drift in the pmf sum
    f_exp = f_exp * (f_obs.sum() / f_exp.sum())
    res = chisquare(f_obs, f_exp)
    return ChiSquareResult(
        statistic=float(res.statistic),
        pvalue=float(res.pvalue),
        dof=len(bins) - 1,
        bins=tuple(bins),
        observed=tuple(float(x) for x in f_obs),
        expected=tuple(float(x) for x in f_exp),
    )
