"""Geometric renewal process and the renewal limit theorems.

For i.i.d. interarrival times with mean μ and standard deviation σ:

- LLN:  N(T) / T -> 1/μ  almost surely as T -> inf
- CLT:  Z = (N(T) - T/μ) / (σ sqrt(T/μ³)) -> Normal(0, 1) in distribution

With Geometric(p) interarrivals on {0, 1, ...}: μ = (1-p)/p, σ = sqrt((1-p)/p²).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.stats import kstest

from .counter import DEFAULT_MAX_DRAWS, replicate
from .distributions import Interarrival, RngLike
from .errors import InvalidParameterError
from .stats import Counts, ReplicationSample, _as_counts


def studentize(counts: Counts, horizon: float, mu: float, sigma: float) -> np.ndarray:
    """Renewal-CLT z-scores ``(N(T) - T/μ) / (σ sqrt(T/μ³))``."""
    if mu <= 0 or sigma <= 0 or horizon <= 0:
        raise InvalidParameterError("mu, sigma and horizon must be > 0")
    n = _as_counts(counts).astype(float)
    return (n - horizon / mu) / (sigma * math.sqrt(horizon / mu**3))


@dataclass(frozen=True)
class GeomRPResult:
    """Replicated counts of a geometric renewal process with its theoretical moments.

    ``mu`` and ``sigma`` describe one interarrival time; ``mean_count`` and
    ``std_count`` are the empirical moments of N(T).
    """

    sample: ReplicationSample
    p: float
    mu: float
    sigma: float
    mean_count: float
    std_count: float

    @property
    def horizon(self) -> float:
        return self.sample.horizon

    @property
    def lln_ratio(self) -> float:
        return self.mean_count / self.horizon

    @property
    def lln_target(self) -> float:
        return 1.0 / self.mu

    @property
    def lln_error(self) -> float:
        return abs(self.lln_ratio - self.lln_target)

    @property
    def z_scores(self) -> np.ndarray:
        return studentize(self.sample, self.horizon, self.mu, self.sigma)

    def clt_check(self):
        """Kolmogorov-Smirnov test of the z-scores against Normal(0, 1).

        N(T) is integer valued, so for short horizons the discreteness alone
        inflates the KS statistic; read the p-value alongside ``horizon``.

        Returns
        -------
        scipy.stats KstestResult
            Named tuple with ``statistic`` and ``pvalue``.
        """
        return kstest(self.z_scores, "norm")


def geom_rp(
    p: float,
    horizon: float,
    replications: int,
    rng: RngLike = None,
    max_draws: int = DEFAULT_MAX_DRAWS,
    n_jobs: Optional[int] = 1,
) -> GeomRPResult:
    """Simulate a renewal process with Geometric(p) interarrival times.

    Parameters
    ----------
    p : float
        Success probability in (0, 1). p = 1 gives μ = 0 (every arrival at
        time zero) and is rejected here.
    horizon : float
        T > 0.
    replications : int
        Number of independent replications.
    rng : np.random.Generator, int or None, optional
        Random source.
    max_draws : int, optional
        Initial draw budget per replication, by default 100.

    Returns
    -------
    GeomRPResult
    """
    dist = Interarrival.geometric(p)
    if dist.mean <= 0:
        raise InvalidParameterError("p must be < 1 for the renewal limit theorems (mean interarrival is 0)")
    sample = replicate(dist, None, horizon, replications, max_draws, rng=rng, n_jobs=n_jobs)
    std_count = sample.std if sample.n > 1 else float("nan")
    return GeomRPResult(
        sample=sample,
        p=float(p),
        mu=dist.mean,
        sigma=dist.std,
        mean_count=sample.mean,
        std_count=std_count,
    )
