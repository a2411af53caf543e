"""
Regime Data Model

Closed regime enumeration, the fixed transition table and the
immutable records produced by the regime filter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping

import numpy as np

PROBABILITY_TOLERANCE = 1e-9


class Regime(Enum):
    """Latent market regime. Definition order is the canonical order."""
    BULL = "Bull"
    BEAR = "Bear"
    NEUTRAL = "Neutral"
    VOLATILE = "Volatile"

    @property
    def color(self) -> str:
        return REGIME_COLORS[self]


REGIMES: tuple[Regime, ...] = tuple(Regime)

REGIME_COLORS = {
    Regime.BULL: "#22c55e",
    Regime.BEAR: "#ef4444",
    Regime.NEUTRAL: "#f59e0b",
    Regime.VOLATILE: "#8b5cf6",
}

# P(regime_t+1 | regime_t), rows = from, columns = to, canonical order
TRANSITION_MATRIX = np.array([
    [0.80, 0.05, 0.10, 0.05],
    [0.05, 0.80, 0.05, 0.10],
    [0.20, 0.20, 0.50, 0.10],
    [0.10, 0.20, 0.10, 0.60],
])
TRANSITION_MATRIX.flags.writeable = False


def validate_transition_matrix(matrix: np.ndarray) -> np.ndarray:
    """
    Check that ``matrix`` is a 4x4 row-stochastic table.

    Returns:
        A read-only float copy of the matrix
    """
    A = np.array(matrix, dtype=float)
    n = len(REGIMES)

    if A.shape != (n, n):
        raise ValueError(f"Transition matrix must be {n}x{n}, got {A.shape}")
    if not np.all(np.isfinite(A)) or np.any(A < 0):
        raise ValueError("Transition matrix entries must be finite and non-negative")
    if not np.allclose(A.sum(axis=1), 1.0, atol=PROBABILITY_TOLERANCE):
        raise ValueError("Transition matrix rows must sum to 1")

    A.flags.writeable = False
    return A


@dataclass(frozen=True)
class ObservationWindow:
    """Trailing returns plus a volatility scalar for one filter step."""
    timestamp: str | None
    returns: tuple[float, ...]
    volatility: float

    def __post_init__(self):
        if len(self.returns) == 0:
            raise ValueError("Observation window needs at least one return")
        object.__setattr__(self, "returns", tuple(float(r) for r in self.returns))

    @property
    def average_return(self) -> float:
        return sum(self.returns) / len(self.returns)


@dataclass(frozen=True)
class RegimeDistribution:
    """
    Probability mass over the four regimes.

    All regimes must be present with finite, non-negative probabilities
    summing to one.
    """
    probabilities: Mapping[Regime, float]

    def __post_init__(self):
        missing = [r.value for r in REGIMES if r not in self.probabilities]
        if missing:
            raise ValueError(f"Distribution missing regimes: {missing}")

        values = np.array([self.probabilities[r] for r in REGIMES], dtype=float)
        if not np.all(np.isfinite(values)) or np.any(values < 0):
            raise ValueError("Probabilities must be finite and non-negative")
        if abs(values.sum() - 1.0) > PROBABILITY_TOLERANCE:
            raise ValueError(f"Probabilities must sum to 1, got {values.sum()}")

        # Freeze a canonical-order copy
        object.__setattr__(
            self, "probabilities", {r: float(v) for r, v in zip(REGIMES, values)}
        )

    @classmethod
    def uniform(cls) -> "RegimeDistribution":
        return cls({r: 1.0 / len(REGIMES) for r in REGIMES})

    @classmethod
    def from_array(cls, values: np.ndarray) -> "RegimeDistribution":
        """Build from a vector in canonical regime order."""
        return cls(dict(zip(REGIMES, values)))

    def to_array(self) -> np.ndarray:
        return np.array([self.probabilities[r] for r in REGIMES])

    def most_likely(self) -> Regime:
        """Argmax; ties go to the earliest regime in canonical order."""
        # np.argmax returns the first maximal index
        return REGIMES[int(np.argmax(self.to_array()))]

    def as_dict(self) -> dict[str, float]:
        return {r.value: p for r, p in self.probabilities.items()}

    def __getitem__(self, regime: Regime) -> float:
        return self.probabilities[regime]

    def __iter__(self) -> Iterator[Regime]:
        return iter(REGIMES)


@dataclass(frozen=True)
class FilterState:
    """Posterior and most likely regime after one observation window."""
    timestamp: str | None
    distribution: RegimeDistribution
    most_likely: Regime

    @property
    def probability(self) -> float:
        """Posterior mass of the most likely regime."""
        return self.distribution[self.most_likely]
