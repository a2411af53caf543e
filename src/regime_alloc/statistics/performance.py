"""
Return and Risk Statistics

Sharpe ratio, maximum drawdown, annualized volatility and compounding
helpers shared by the strategy simulator and the portfolio layer.

All dispersion measures use the population standard deviation
(divide by N). Risk-free rate is taken as zero.
"""

from typing import Sequence

import numpy as np

TRADING_DAYS_PER_YEAR = 252


def _as_array(returns: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(returns, dtype=float)


def sharpe_ratio(
    returns: Sequence[float] | np.ndarray,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """
    Annualized Sharpe ratio.

    (mean / std) * sqrt(periods_per_year); 0 for an empty series or
    zero standard deviation.
    """
    r = _as_array(returns)
    if len(r) == 0:
        return 0.0

    std = np.std(r)
    if std == 0:
        return 0.0

    return float(np.mean(r) / std * np.sqrt(periods_per_year))


def max_drawdown(returns: Sequence[float] | np.ndarray) -> float:
    """
    Largest peak-to-trough decline of the compounded equity curve.

    The curve starts at 1.0 and drawdown is expressed as a fraction of
    the running peak.
    """
    r = _as_array(returns)
    if len(r) == 0:
        return 0.0

    equity = np.concatenate(([1.0], np.cumprod(1.0 + r)))
    peaks = np.maximum.accumulate(equity)
    drawdowns = (peaks - equity) / peaks

    return float(np.max(drawdowns))


def annualized_volatility(
    returns: Sequence[float] | np.ndarray,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> float:
    """Population std * sqrt(periods_per_year); 0 for fewer than two points."""
    r = _as_array(returns)
    if len(r) < 2:
        return 0.0
    return float(np.std(r) * np.sqrt(periods_per_year))


def cumulative_returns(returns: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Compounded cumulative return after each period.

    cumulative[t] = (1 + cumulative[t-1]) * (1 + r[t]) - 1, starting from 0.
    """
    r = _as_array(returns)
    return np.cumprod(1.0 + r) - 1.0
