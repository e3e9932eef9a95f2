"""Interarrival-time families for renewal processes.

Three families are supported, parameterized as in standard probability texts:

- exponential(rate)            λ > 0, mean 1/λ
- lognormal(location, scale)   log of the draw ~ Normal(location, scale²), scale > 0
- geometric(p)                 failures before the first success, p in (0, 1]

The geometric family lives on {0, 1, 2, ...}, so arrival times built from it
may repeat (several renewals at the same instant).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidParameterError

PARAM_NAMES: Dict[str, Tuple[str, ...]] = {
    "exponential": ("rate",),
    "lognormal": ("location", "scale"),
    "geometric": ("p",),
}

RngLike = Union[None, int, np.random.SeedSequence, np.random.Generator]
Params = Union[None, Mapping[str, float], Sequence[float]]


def resolve_rng(rng: RngLike = None) -> np.random.Generator:
    """Turn a seed (or nothing) into a generator; pass generators through untouched."""
    if rng is None or isinstance(rng, (int, np.integer, np.random.SeedSequence)):
        return np.random.default_rng(rng)
    return rng


def _check_finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}") from e
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")
    return value


@dataclass(frozen=True)
class Interarrival:
    """A distribution family tag together with its validated parameters."""

    family: str
    params: Tuple[float, ...]

    def __post_init__(self) -> None:
        if self.family not in PARAM_NAMES:
            raise InvalidParameterError(
                f"unknown interarrival family {self.family!r}; expected one of {sorted(PARAM_NAMES)}"
            )
        names = PARAM_NAMES[self.family]
        if len(self.params) != len(names):
            raise InvalidParameterError(f"{self.family} takes parameters {names}, got {self.params!r}")
        values = tuple(_check_finite(n, v) for n, v in zip(names, self.params))
        object.__setattr__(self, "params", values)

        if self.family == "exponential" and values[0] <= 0:
            raise InvalidParameterError("rate must be > 0")
        if self.family == "lognormal" and values[1] <= 0:
            raise InvalidParameterError("scale must be > 0")
        if self.family == "geometric" and not (0.0 < values[0] <= 1.0):
            raise InvalidParameterError("p must be in (0, 1]")

    # constructors
    @classmethod
    def exponential(cls, rate: float) -> "Interarrival":
        return cls("exponential", (rate,))

    @classmethod
    def lognormal(cls, location: float, scale: float) -> "Interarrival":
        return cls("lognormal", (location, scale))

    @classmethod
    def geometric(cls, p: float) -> "Interarrival":
        return cls("geometric", (p,))

    @classmethod
    def from_tag(cls, tag: str, params: Params = None) -> "Interarrival":
        """Build from a family name and its parameters.

        ``params`` may be a mapping keyed by parameter name (``{"rate": 2.0}``)
        or a positional sequence in the order listed in ``PARAM_NAMES``.
        """
        tag = str(tag).lower()
        if tag not in PARAM_NAMES:
            raise InvalidParameterError(
                f"unknown interarrival family {tag!r}; expected one of {sorted(PARAM_NAMES)}"
            )
        names = PARAM_NAMES[tag]
        if params is None:
            raise InvalidParameterError(f"{tag} requires parameters {names}")
        if isinstance(params, Mapping):
            unknown = set(params) - set(names)
            missing = [n for n in names if n not in params]
            if unknown or missing:
                raise InvalidParameterError(
                    f"{tag} takes parameters {names}; missing={missing}, unknown={sorted(unknown)}"
                )
            values = tuple(params[n] for n in names)
        else:
            values = tuple(params)
        return cls(tag, values)

    @property
    def params_dict(self) -> Dict[str, float]:
        return dict(zip(PARAM_NAMES[self.family], self.params))

    # theoretical moments of one interarrival time
    @property
    def mean(self) -> float:
        if self.family == "exponential":
            return 1.0 / self.params[0]
        if self.family == "lognormal":
            mu, sigma = self.params
            return math.exp(mu + sigma**2 / 2.0)
        p = self.params[0]
        return (1.0 - p) / p

    @property
    def variance(self) -> float:
        if self.family == "exponential":
            return 1.0 / self.params[0] ** 2
        if self.family == "lognormal":
            mu, sigma = self.params
            return math.expm1(sigma**2) * math.exp(2.0 * mu + sigma**2)
        p = self.params[0]
        return (1.0 - p) / p**2

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    def sample(self, n: int, rng: RngLike = None) -> np.ndarray:
        """Draw ``n`` i.i.d. interarrival times.

        Parameters
        ----------
        n : int
            Number of draws (>= 0).
        rng : np.random.Generator, int or None
            Random source; integers are used as seeds.

        Returns
        -------
        np.ndarray
            Float array of shape ``(n,)`` with non-negative entries.
        """
        if n < 0:
            raise InvalidParameterError("n must be >= 0")
        gen = resolve_rng(rng)
        if self.family == "exponential":
            return np.asarray(gen.exponential(scale=1.0 / self.params[0], size=n), dtype=float)
        if self.family == "lognormal":
            mu, sigma = self.params
            return np.asarray(gen.lognormal(mean=mu, sigma=sigma, size=n), dtype=float)
        # numpy counts trials up to and including the first success (support 1, 2, ...)
        return np.asarray(gen.geometric(self.params[0], size=n), dtype=float) - 1.0

    def __str__(self) -> str:
        args = ", ".join(f"{k}={v:g}" for k, v in self.params_dict.items())
        return f"{self.family}({args})"


def as_interarrival(distribution: Union[str, Interarrival], params: Params = None) -> Interarrival:
    """Accept either a ready ``Interarrival`` or a ``(tag, params)`` pair."""
    if isinstance(distribution, Interarrival):
        if params is not None:
            raise InvalidParameterError("params must be omitted when passing an Interarrival")
        return distribution
    return Interarrival.from_tag(distribution, params)


def draw_interarrivals(
    distribution: Union[str, Interarrival],
    params: Params,
    n: int,
    rng: RngLike = None,
) -> np.ndarray:
    """Draw ``n`` i.i.d. samples from a named interarrival distribution."""
    return as_interarrival(distribution, params).sample(n, rng)
