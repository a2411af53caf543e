"""Market data record supplied by the external data source."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class MarketObservation:
    """One daily observation: period return and trailing volatility."""
    period_return: float
    volatility: float
    date: str | None = None
    price: float | None = None

    def __post_init__(self):
        for name in ("period_return", "volatility"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value} on {self.date}")
