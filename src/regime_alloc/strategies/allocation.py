"""
Regime-Conditioned Allocation

Maps a regime distribution to strategy weights by taking the
probability-weighted regime factor of every strategy and normalizing.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

import numpy as np

from regime_alloc.errors import DegenerateAllocationError
from regime_alloc.regime.types import (
    PROBABILITY_TOLERANCE,
    REGIMES,
    FilterState,
    RegimeDistribution,
)
from .profiles import STRATEGIES, STRATEGY_PROFILES, Strategy, StrategyProfile


@dataclass(frozen=True)
class AllocationWeights:
    """Non-negative strategy weights summing to one."""
    weights: Mapping[Strategy, float]

    def __post_init__(self):
        values = np.array(list(self.weights.values()), dtype=float)
        if not np.all(np.isfinite(values)) or np.any(values < 0):
            raise ValueError("Weights must be finite and non-negative")
        if abs(values.sum() - 1.0) > PROBABILITY_TOLERANCE:
            raise ValueError(f"Weights must sum to 1, got {values.sum()}")
        object.__setattr__(
            self, "weights", {s: float(w) for s, w in self.weights.items()}
        )

    def __getitem__(self, strategy: Strategy) -> float:
        return self.weights[strategy]

    def __iter__(self) -> Iterator[Strategy]:
        return iter(self.weights)

    def get(self, strategy: Strategy, default: float = 0.0) -> float:
        return self.weights.get(strategy, default)

    def as_dict(self) -> dict[str, float]:
        return {s.value: w for s, w in self.weights.items()}

    def to_records(
        self, profiles: Mapping[Strategy, StrategyProfile] = STRATEGY_PROFILES
    ) -> list[dict]:
        """Rows of {name, weight, color} for chart consumers."""
        return [
            {
                "name": s.value,
                "weight": w,
                "color": profiles[s].color if s in profiles else None,
            }
            for s, w in self.weights.items()
        ]


def allocate(
    distribution: RegimeDistribution,
    profiles: Mapping[Strategy, StrategyProfile] = STRATEGY_PROFILES,
) -> AllocationWeights:
    """
    Strategy weights for one regime distribution.

    raw[s] = sum_regime p(regime) * factor[s][regime], normalized by the
    total over strategies.

    Raises:
        DegenerateAllocationError: If the raw weights sum to zero or a
            non-finite value
    """
    probs = distribution.to_array()
    strategies = [s for s in STRATEGIES if s in profiles]

    raw = np.array([
        np.dot(probs, [profiles[s].factor(r) for r in REGIMES])
        for s in strategies
    ])

    total = np.sum(raw)
    if not np.isfinite(total) or total <= 0:
        raise DegenerateAllocationError(
            f"Cannot normalize strategy weights with total {total}"
        )

    return AllocationWeights(dict(zip(strategies, raw / total)))


def allocate_over_time(
    states: Iterable[FilterState],
    profiles: Mapping[Strategy, StrategyProfile] = STRATEGY_PROFILES,
) -> list[AllocationWeights]:
    """Allocation for every filter state, in order."""
    return [allocate(state.distribution, profiles) for state in states]
