"""Shared fixtures for regime_alloc tests."""

import numpy as np
import pandas as pd
import pytest

from regime_alloc.market import MarketObservation

# (days, mean daily return, half-width of uniform daily noise)
REGIME_SEGMENTS = [
    (40, 0.012, 0.004),   # strong up-trend
    (30, 0.0, 0.05),      # turbulent
    (40, -0.012, 0.004),  # strong down-trend
    (30, 0.0, 0.003),     # flat
]


def make_observations(seed: int = 42) -> list[MarketObservation]:
    """Daily records that move through distinct market phases."""
    rng = np.random.default_rng(seed)
    dates = pd.bdate_range("2020-01-01", periods=sum(n for n, _, _ in REGIME_SEGMENTS))

    returns = np.concatenate([
        mu + rng.uniform(-width, width, size=n) for n, mu, width in REGIME_SEGMENTS
    ])
    prices = 100 * np.cumprod(1 + returns)
    volatility = pd.Series(returns).rolling(21, min_periods=5).std(ddof=0)
    volatility = volatility.fillna(0.01).to_numpy()

    return [
        MarketObservation(
            period_return=float(r),
            volatility=float(v),
            date=d.strftime("%Y-%m-%d"),
            price=float(p),
        )
        for d, p, r, v in zip(dates, prices, returns, volatility)
    ]


@pytest.fixture
def market_observations() -> list[MarketObservation]:
    return make_observations()


@pytest.fixture
def market_frame(market_observations) -> pd.DataFrame:
    return pd.DataFrame({
        "date": [o.date for o in market_observations],
        "price": [o.price for o in market_observations],
        "returns": [o.period_return for o in market_observations],
        "volatility": [o.volatility for o in market_observations],
    })
