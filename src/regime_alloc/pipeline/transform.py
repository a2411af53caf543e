"""
Observation Transform Layer

Converts daily market records from the external data source into
the rolling observation windows the regime filter consumes.
"""

from typing import Sequence

import pandas as pd
import structlog

from regime_alloc.market import MarketObservation
from regime_alloc.regime.types import ObservationWindow

logger = structlog.get_logger()

DEFAULT_WINDOW = 5

REQUIRED_COLUMNS = ("date", "price", "returns", "volatility")
COLUMN_ALIASES = {"return": "returns"}


def build_observation_windows(
    observations: Sequence[MarketObservation],
    window: int = DEFAULT_WINDOW,
) -> list[ObservationWindow]:
    """
    Rolling return windows for the regime filter.

    The window for observation i holds the returns of observations
    i-window .. i-1 together with the date and volatility of observation i,
    so the first window belongs to observation ``window``.

    Args:
        observations: Daily records in time order
        window: Number of trailing returns per window

    Returns:
        len(observations) - window windows (none if there are too few)
    """
    if window < 1:
        raise ValueError(f"Window length must be positive, got {window}")

    windows = []
    for i in range(window, len(observations)):
        trailing = observations[i - window:i]
        windows.append(ObservationWindow(
            timestamp=observations[i].date,
            returns=tuple(o.period_return for o in trailing),
            volatility=observations[i].volatility,
        ))

    return windows


def observations_from_frame(df: pd.DataFrame) -> list[MarketObservation]:
    """
    Convert a tabular market history into MarketObservation records.

    Expects columns date, price, returns, volatility (case-insensitive,
    ``return`` is accepted for ``returns``). Rows are sorted by date.
    """
    data = df.rename(columns=lambda c: str(c).strip().lower())
    data = data.rename(columns=COLUMN_ALIASES)

    missing = [c for c in REQUIRED_COLUMNS if c not in data.columns]
    if missing:
        raise ValueError(f"Market data missing columns: {missing}")

    data = data.assign(date=pd.to_datetime(data["date"])).sort_values("date")

    observations = [
        MarketObservation(
            period_return=float(row.returns),
            volatility=float(row.volatility),
            date=row.date.strftime("%Y-%m-%d"),
            price=float(row.price),
        )
        for row in data.itertuples(index=False)
    ]

    logger.debug("Loaded market observations", n=len(observations))
    return observations

