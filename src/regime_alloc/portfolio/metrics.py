"""
Portfolio Composition

Combines strategy return series under time-varying allocation weights
into a portfolio return series, its cumulative curve and summary
risk metrics.
"""

import math
from dataclasses import dataclass
from typing import Hashable, Mapping, Sequence

import numpy as np
import structlog

from regime_alloc.errors import LengthMismatchError
from regime_alloc.statistics.performance import (
    TRADING_DAYS_PER_YEAR,
    annualized_volatility,
    cumulative_returns,
    max_drawdown,
    sharpe_ratio,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class PortfolioSummary:
    """Portfolio return path and summary metrics."""
    returns: np.ndarray
    cumulative: np.ndarray
    total_return: float
    sharpe: float
    max_drawdown: float
    volatility: float

    def to_dict(self) -> dict:
        return {
            "returns": self.returns.tolist(),
            "cumulative": self.cumulative.tolist(),
            "total_return": self.total_return,
            "sharpe": self.sharpe,
            "max_drawdown": self.max_drawdown,
            "volatility": self.volatility,
        }


def _is_missing(value: float | None) -> bool:
    return value is None or (isinstance(value, (float, np.floating)) and math.isnan(value))


def summarize_returns(
    returns: Sequence[float] | np.ndarray,
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> PortfolioSummary:
    """Build a PortfolioSummary from a plain return series."""
    r = np.array(returns, dtype=float)
    cumulative = cumulative_returns(r)
    r.flags.writeable = False
    cumulative.flags.writeable = False

    return PortfolioSummary(
        returns=r,
        cumulative=cumulative,
        total_return=float(cumulative[-1]) if len(cumulative) else 0.0,
        sharpe=sharpe_ratio(r, periods_per_year),
        max_drawdown=max_drawdown(r),
        volatility=annualized_volatility(r, periods_per_year),
    )


def compose(
    strategy_returns: Mapping[Hashable, Sequence[float | None]],
    allocations_over_time: Sequence[Mapping],
    periods_per_year: int = TRADING_DAYS_PER_YEAR,
) -> PortfolioSummary:
    """
    Weighted portfolio returns under per-period allocations.

    portfolio[t] = sum_s returns[s][t] * weight[t][s]. A period where any
    strategy has no value (None or NaN) is dropped from the output rather
    than filled with zero.

    Args:
        strategy_returns: Return series keyed by strategy
        allocations_over_time: Weights per period, aligned with the series;
            strategies absent from a period's weights count as weight 0
        periods_per_year: Annualization factor

    Returns:
        PortfolioSummary over the periods that were kept

    Raises:
        LengthMismatchError: If any series length differs from the number
            of allocation periods, or a strategy with non-zero weight has
            no series
    """
    n_periods = len(allocations_over_time)
    for strategy, series in strategy_returns.items():
        if len(series) != n_periods:
            raise LengthMismatchError(
                f"Return series for {getattr(strategy, 'value', strategy)} has "
                f"{len(series)} periods, allocations have {n_periods}"
            )

    portfolio_returns = []
    skipped = 0

    for t in range(n_periods):
        weights = allocations_over_time[t]
        for strategy in weights:
            if weights[strategy] != 0 and strategy not in strategy_returns:
                raise LengthMismatchError(
                    f"No return series for {getattr(strategy, 'value', strategy)}, "
                    f"which has weight in period {t}"
                )

        values = {s: series[t] for s, series in strategy_returns.items()}
        if any(_is_missing(v) for v in values.values()):
            skipped += 1
            continue

        portfolio_returns.append(
            sum(float(v) * weights.get(s, 0.0) for s, v in values.items())
        )

    if skipped:
        logger.debug("Skipped periods with missing returns", skipped=skipped)

    return summarize_returns(portfolio_returns, periods_per_year)
