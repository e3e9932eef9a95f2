from __future__ import annotations

from typing import Callable, Dict, Optional

import numpy as np
import pandas as pd

from .errors import InvalidParameterError
from .stats import ReplicationSample


def pmf_table(
    sample: ReplicationSample,
    theoretical: Optional[Callable[[np.ndarray], np.ndarray]] = None,
) -> pd.DataFrame:
    """Frequency table of N(T), optionally next to a theoretical pmf.

    Parameters
    ----------
    sample : ReplicationSample
        Replicated counts; not modified.
    theoretical : callable, optional
        Maps an array of counts k to P(N(T) = k), e.g.
        ``lambda k: poisson_pmf(k, rate, horizon)``.

    Returns
    -------
    pd.DataFrame
        Columns ``k, count, empirical`` and, with ``theoretical``, also
        ``theoretical, abs_diff``. One row per k from 0 to max(N).
    """
    ks = np.arange(int(sample.counts.max()) + 1)
    freq = np.bincount(sample.counts, minlength=ks.size)
    df = pd.DataFrame({"k": ks, "count": freq, "empirical": freq / sample.n})
    if theoretical is not None:
        df["theoretical"] = np.asarray(theoretical(ks), dtype=float)
        df["abs_diff"] = (df["empirical"] - df["theoretical"]).abs()
    return df


def summarize(sample: ReplicationSample, rate: Optional[float] = None) -> Dict[str, float]:
    """Moments of N(T); with ``rate`` also the Poisson-process expectation λT."""
    out: Dict[str, float] = dict(
        n=sample.n,
        horizon=sample.horizon,
        mean=sample.mean,
        variance=sample.variance if sample.n > 1 else float("nan"),
        std=sample.std if sample.n > 1 else float("nan"),
    )
    if rate is not None:
        if rate <= 0:
            raise InvalidParameterError("rate must be > 0")
        expected = rate * sample.horizon
        out["expected_mean"] = expected
        out["rel_error"] = abs(sample.mean - expected) / expected
    return out
