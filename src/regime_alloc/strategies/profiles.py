"""Strategy set and regime performance factors."""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from regime_alloc.regime.types import REGIMES, Regime


class Strategy(Enum):
    """Closed set of allocatable strategies, in canonical order."""
    MOMENTUM = "momentum"
    MEAN_REVERSION = "meanReversion"
    VOLATILITY = "volatility"
    VALUE_INVESTING = "valueInvesting"


STRATEGIES: tuple[Strategy, ...] = tuple(Strategy)


@dataclass(frozen=True)
class StrategyProfile:
    """Per-regime return multiplier and display color for one strategy."""
    name: Strategy
    factors: Mapping[Regime, float]
    color: str

    def __post_init__(self):
        missing = [r.value for r in REGIMES if r not in self.factors]
        if missing:
            raise ValueError(f"{self.name.value} profile missing regimes: {missing}")
        object.__setattr__(
            self, "factors", {r: float(self.factors[r]) for r in REGIMES}
        )

    def factor(self, regime: Regime) -> float:
        return self.factors[regime]


STRATEGY_PROFILES: dict[Strategy, StrategyProfile] = {
    Strategy.MOMENTUM: StrategyProfile(
        name=Strategy.MOMENTUM,
        factors={
            Regime.BULL: 1.5,
            Regime.BEAR: 0.6,
            Regime.NEUTRAL: 0.9,
            Regime.VOLATILE: 0.7,
        },
        color="#3b82f6",
    ),
    Strategy.MEAN_REVERSION: StrategyProfile(
        name=Strategy.MEAN_REVERSION,
        factors={
            Regime.BULL: 0.7,
            Regime.BEAR: 1.2,
            Regime.NEUTRAL: 1.4,
            Regime.VOLATILE: 0.8,
        },
        color="#f43f5e",
    ),
    Strategy.VOLATILITY: StrategyProfile(
        name=Strategy.VOLATILITY,
        factors={
            Regime.BULL: 0.5,
            Regime.BEAR: 1.0,
            Regime.NEUTRAL: 0.7,
            Regime.VOLATILE: 1.8,
        },
        color="#8b5cf6",
    ),
    Strategy.VALUE_INVESTING: StrategyProfile(
        name=Strategy.VALUE_INVESTING,
        factors={
            Regime.BULL: 0.9,
            Regime.BEAR: 1.1,
            Regime.NEUTRAL: 1.2,
            Regime.VOLATILE: 1.0,
        },
        color="#10b981",
    ),
}
