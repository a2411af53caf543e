"""Strategy profiles, regime-conditioned allocation and simulation."""

from .allocation import AllocationWeights, allocate, allocate_over_time
from .profiles import STRATEGIES, STRATEGY_PROFILES, Strategy, StrategyProfile
from .simulator import (
    RegimePerformance,
    StrategyPerformance,
    regime_breakdown,
    simulate,
)

__all__ = [
    "AllocationWeights",
    "allocate",
    "allocate_over_time",
    "STRATEGIES",
    "STRATEGY_PROFILES",
    "Strategy",
    "StrategyProfile",
    "RegimePerformance",
    "StrategyPerformance",
    "regime_breakdown",
    "simulate",
]
