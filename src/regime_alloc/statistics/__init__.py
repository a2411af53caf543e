"""
Performance Statistics Module

Return/risk measures shared by strategy simulation and portfolio
composition.
"""

from .performance import (
    TRADING_DAYS_PER_YEAR,
    annualized_volatility,
    cumulative_returns,
    max_drawdown,
    sharpe_ratio,
)

__all__ = [
    "TRADING_DAYS_PER_YEAR",
    "annualized_volatility",
    "cumulative_returns",
    "max_drawdown",
    "sharpe_ratio",
]
