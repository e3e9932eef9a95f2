"""Monte Carlo simulation of renewal processes and their counting statistic N(T).

Interarrival times are exponential, lognormal or geometric; replicated counts
are summarized (pmf, mean, variance) and checked against the Poisson closed
form and the renewal law of large numbers / central limit theorem.
"""

from .counter import (
    DEFAULT_MAX_BUDGET,
    DEFAULT_MAX_DRAWS,
    arrival_times,
    counting_statistic,
    estimate_distribution,
    replicate,
    simulate_one,
)
from .distributions import Interarrival, draw_interarrivals, resolve_rng
from .errors import InsufficientBudgetError, InvalidParameterError
from .geometric import GeomRPResult, geom_rp, studentize
from .oracle import ChiSquareResult, poisson_chisquare, poisson_pmf
from .report import pmf_table, summarize
from .stats import ReplicationSample, empirical_pmf, mean, std, variance

__version__ = "0.1.0"
