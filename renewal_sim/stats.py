from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from .distributions import Interarrival
from .errors import InvalidParameterError

Counts = Union[Sequence[int], np.ndarray, "ReplicationSample"]


def _integral_counts(counts) -> np.ndarray:
    """Validate raw counts and return them as a fresh int64 array."""
    try:
        arr = np.array(counts, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError("counts must be numeric") from e
    if arr.ndim != 1:
        raise InvalidParameterError("counts must be one-dimensional")
    if arr.size == 0:
        raise InvalidParameterError("counts must not be empty")
    if not np.isfinite(arr).all():
        raise InvalidParameterError("counts must be finite")
    if (arr != np.floor(arr)).any():
        raise InvalidParameterError("counts must be whole numbers")
    if (arr < 0).any():
        raise InvalidParameterError("counts must be non-negative")
    return arr.astype(np.int64)


def _as_counts(counts: Counts) -> np.ndarray:
    if isinstance(counts, ReplicationSample):
        return counts.counts
    return _integral_counts(counts)


def mean(counts: Counts) -> float:
    return float(np.mean(_as_counts(counts)))


def variance(counts: Counts) -> float:
    """Unbiased sample variance (ddof=1). NaN, with a warning, below two observations."""
    arr = _as_counts(counts)
    if arr.size < 2:
        warnings.warn("variance of a single observation is undefined", RuntimeWarning, stacklevel=2)
        return float("nan")
    return float(np.var(arr, ddof=1))


def std(counts: Counts) -> float:
    arr = _as_counts(counts)
    if arr.size < 2:
        warnings.warn("standard deviation of a single observation is undefined", RuntimeWarning, stacklevel=2)
        return float("nan")
    return math.sqrt(float(np.var(arr, ddof=1)))


def empirical_pmf(counts: Counts) -> pd.Series:
    """Estimate the pmf of N(T) from replicated counts.

    Parameters
    ----------
    counts : array-like of int or ReplicationSample
        One counting statistic per replication.

    Returns
    -------
    pd.Series
        Indexed by the observed count values (ascending), holding
        ``frequency / n``. Values sum to one.
    """
    arr = _as_counts(counts)
    values, freq = np.unique(arr, return_counts=True)
    pmf = pd.Series(freq / arr.size, index=pd.Index(values.astype(int), name="k"), name="pmf")
    return pmf


@dataclass(frozen=True)
class ReplicationSample:
    """Counts N(T) from independent replications of one renewal process.

    The counts array is read-only; derive new arrays instead of editing it.
    """

    counts: np.ndarray
    horizon: float
    distribution: Optional[Interarrival] = None

    def __post_init__(self) -> None:
        arr = _integral_counts(self.counts)
        arr.setflags(write=False)
        object.__setattr__(self, "counts", arr)

    def __len__(self) -> int:
        return int(self.counts.size)

    @property
    def n(self) -> int:
        return int(self.counts.size)

    @property
    def mean(self) -> float:
        return mean(self.counts)

    @property
    def variance(self) -> float:
        return variance(self.counts)

    @property
    def std(self) -> float:
        return std(self.counts)

    @property
    def pmf(self) -> pd.Series:
        return empirical_pmf(self.counts)
