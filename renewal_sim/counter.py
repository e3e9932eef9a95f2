"""Renewal-process simulation and the counting statistic N(T).

One replication draws a block of interarrival times, cumulative-sums them
into arrival times and counts the arrivals in (0, T]. The block is grown
(doubled) whenever it runs out before the arrival times pass the horizon,
up to a hard ceiling.
"""

from __future__ import annotations

import math
import multiprocessing
from typing import List, Optional, Tuple, Union

import numpy as np

from .distributions import Interarrival, Params, RngLike, as_interarrival, resolve_rng
from .errors import InsufficientBudgetError, InvalidParameterError
from .stats import ReplicationSample

# Config
DEFAULT_MAX_DRAWS = 100
DEFAULT_MAX_BUDGET = 2**24


def _check_horizon(horizon: float) -> float:
    try:
        horizon = float(horizon)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"horizon must be a real number, got {horizon!r}") from e
    if not math.isfinite(horizon) or horizon <= 0:
        raise InvalidParameterError(f"horizon must be finite and > 0, got {horizon}")
    return horizon


def _check_count(name: str, value: int) -> int:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    try:
        as_float = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}") from e
    if not math.isfinite(as_float) or as_float != math.floor(as_float) or as_float < 1:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}")
    return int(as_float)


def _check_budget(max_draws: int, max_budget: int) -> None:
    max_draws = _check_count("max_draws", max_draws)
    if _check_count("max_budget", max_budget) < max_draws:
        raise InvalidParameterError(f"max_budget must be >= max_draws, got {max_budget!r}")


def _check_replications(replications: int) -> int:
    return _check_count("replications", replications)


def arrival_times(samples: np.ndarray) -> np.ndarray:
    """Cumulative sums of the interarrival times (S_1, S_2, ...)."""
    samples = np.asarray(samples, dtype=float)
    if samples.ndim != 1:
        raise InvalidParameterError("interarrival samples must be one-dimensional")
    if (samples < 0).any():
        raise InvalidParameterError("interarrival times must be non-negative")
    return np.cumsum(samples)


def counting_statistic(samples: np.ndarray, horizon: float) -> int:
    """Number of arrivals at or before ``horizon``.

    With ``S = arrival_times(samples)`` and ``S_0 = 0`` the result is the
    unique ``N`` such that ``S_N <= horizon < S_{N+1}``.

    Raises
    ------
    InsufficientBudgetError
        If every arrival time is still ``<= horizon``, so N cannot be told
        apart from "at least len(samples)".
    """
    horizon = _check_horizon(horizon)
    s = arrival_times(samples)
    n = int(np.searchsorted(s, horizon, side="right"))
    if n == s.size:
        raise InsufficientBudgetError(s.size, horizon)
    return n


def simulate_one(
    distribution: Union[str, Interarrival],
    params: Params,
    horizon: float,
    max_draws: int = DEFAULT_MAX_DRAWS,
    *,
    rng: RngLike = None,
    adaptive: bool = True,
    max_budget: int = DEFAULT_MAX_BUDGET,
) -> int:
    """Simulate one renewal process up to ``horizon`` and return N(T).

    Parameters
    ----------
    distribution : str or Interarrival
        Family tag (``"exponential"``, ``"lognormal"``, ``"geometric"``) or
        a ready ``Interarrival``.
    params : mapping, sequence or None
        Family parameters; ``None`` when ``distribution`` is an ``Interarrival``.
    horizon : float
        T > 0.
    max_draws : int, optional
        Interarrival times drawn up front, by default 100.
    rng : np.random.Generator, int or None, optional
        Random source; a fixed seed makes the count reproducible.
    adaptive : bool, optional
        Double the draw budget until the horizon is passed, by default True.
        When False the first exhaustion raises.
    max_budget : int, optional
        Ceiling on the total number of draws, by default 2**24.

    Returns
    -------
    int
        The counting statistic N(T) >= 0.

    Raises
    ------
    InvalidParameterError
        Before any draw, for an invalid horizon, budget or distribution.
    InsufficientBudgetError
        If the budget (or, when adaptive, the ceiling) is exhausted.
    """
    dist = as_interarrival(distribution, params)
    horizon = _check_horizon(horizon)
    _check_budget(max_draws, max_budget)
    gen = resolve_rng(rng)

    samples = dist.sample(int(max_draws), gen)
    while True:
        try:
            return counting_statistic(samples, horizon)
        except InsufficientBudgetError:
            if not adaptive:
                raise
            extra = min(samples.size, int(max_budget) - samples.size)
            if extra <= 0:
                raise InsufficientBudgetError(
                    samples.size,
                    horizon,
                    f"{dist} did not pass horizon T={horizon:g} within the ceiling of {max_budget} draws",
                ) from None
            samples = np.concatenate([samples, dist.sample(extra, gen)])


def _replicate_chunk(task: Tuple[Interarrival, float, int, int, np.random.SeedSequence, bool, int]) -> np.ndarray:
    dist, horizon, size, max_draws, seed, adaptive, max_budget = task
    gen = np.random.default_rng(seed)
    return np.array(
        [
            simulate_one(dist, None, horizon, max_draws, rng=gen, adaptive=adaptive, max_budget=max_budget)
            for _ in range(size)
        ],
        dtype=np.int64,
    )


def replicate(
    distribution: Union[str, Interarrival],
    params: Params,
    horizon: float,
    replications: int,
    max_draws: int = DEFAULT_MAX_DRAWS,
    *,
    rng: RngLike = None,
    adaptive: bool = True,
    max_budget: int = DEFAULT_MAX_BUDGET,
    n_jobs: Optional[int] = 1,
) -> ReplicationSample:
    """Run ``replications`` independent renewal simulations.

    All parameters are validated before the first draw. With ``n_jobs > 1``
    (or ``None`` for every core) the replications are split into chunks, each
    seeded from its own child ``SeedSequence``, and mapped over a process
    pool; the chunks are concatenated in order so a fixed seed and ``n_jobs``
    give a fixed sample.
    """
    dist = as_interarrival(distribution, params)
    horizon = _check_horizon(horizon)
    replications = _check_replications(replications)
    _check_budget(max_draws, max_budget)
    if n_jobs is None or n_jobs < 1:
        n_jobs = multiprocessing.cpu_count()

    gen = resolve_rng(rng)
    if n_jobs == 1 or replications == 1:
        counts = [
            simulate_one(dist, None, horizon, max_draws, rng=gen, adaptive=adaptive, max_budget=max_budget)
            for _ in range(replications)
        ]
        return ReplicationSample(np.asarray(counts, dtype=np.int64), horizon, dist)

    n_chunks = min(int(n_jobs), replications)
    seeds = np.random.SeedSequence(int(gen.integers(0, 2**63 - 1))).spawn(n_chunks)
    sizes = [len(c) for c in np.array_split(np.arange(replications), n_chunks)]
    tasks = [
        (dist, horizon, size, int(max_draws), seed, adaptive, int(max_budget))
        for size, seed in zip(sizes, seeds)
    ]
    with multiprocessing.Pool(processes=n_chunks) as pool:
        parts: List[np.ndarray] = pool.map(_replicate_chunk, tasks)
    return ReplicationSample(np.concatenate(parts), horizon, dist)


def estimate_distribution(
    distribution: Union[str, Interarrival],
    params: Params,
    horizon: float,
    replications: int,
    max_draws: int = DEFAULT_MAX_DRAWS,
    *,
    rng: RngLike = None,
    adaptive: bool = True,
    max_budget: int = DEFAULT_MAX_BUDGET,
    n_jobs: Optional[int] = 1,
) -> ReplicationSample:
    """Estimate the distribution of N(T) by Monte Carlo.

    Returns the ``ReplicationSample``; its ``pmf``, ``mean`` and ``variance``
    (unbiased) are the empirical estimates.
    """
    return replicate(
        distribution,
        params,
        horizon,
        replications,
        max_draws,
        rng=rng,
        adaptive=adaptive,
        max_budget=max_budget,
        n_jobs=n_jobs,
    )
