"""
Regime Allocation Pipeline Orchestrator

Coordinates the full computation:
1. Build rolling observation windows from daily market records
2. Filter regime probabilities
3. Allocate strategy weights per step
4. Simulate strategy returns under the detected regimes
5. Compose the adaptive portfolio and a buy-and-hold benchmark
"""

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd
import structlog

from regime_alloc.config import settings
from regime_alloc.errors import RegimeAllocError
from regime_alloc.market import MarketObservation
from regime_alloc.portfolio.metrics import PortfolioSummary, compose, summarize_returns
from regime_alloc.regime.filter import RegimeFilter, regime_sequence
from regime_alloc.regime.types import REGIMES, FilterState, ObservationWindow, Regime
from regime_alloc.strategies.allocation import AllocationWeights, allocate_over_time
from regime_alloc.strategies.profiles import STRATEGIES, Strategy
from regime_alloc.strategies.simulator import StrategyPerformance, simulate
from .transform import build_observation_windows

logger = structlog.get_logger()


@dataclass(frozen=True)
class PerformancePoint:
    """Benchmark vs portfolio cumulative return on one date."""
    date: str | None
    benchmark: float
    adaptive_portfolio: float
    regime: Regime


@dataclass
class PipelineResult:
    """Every derived record of one pipeline run."""
    windows: list[ObservationWindow]
    states: list[FilterState]
    allocations: list[AllocationWeights]
    strategy_performance: dict[Strategy, StrategyPerformance]
    portfolio: PortfolioSummary
    benchmark: PortfolioSummary
    performance: list[PerformancePoint] = field(default_factory=list)

    @property
    def regimes(self) -> list[Regime]:
        return regime_sequence(self.states)

    @property
    def latest_allocation(self) -> AllocationWeights | None:
        return self.allocations[-1] if self.allocations else None

    def probabilities_frame(self) -> pd.DataFrame:
        """Per-step regime probabilities plus the most likely regime."""
        rows = []
        for state in self.states:
            row = {"date": state.timestamp}
            row.update(state.distribution.as_dict())
            row["regime"] = state.most_likely.value
            row["probability"] = state.probability
            rows.append(row)
        return pd.DataFrame(rows, columns=["date", *[r.value for r in REGIMES], "regime", "probability"])

    def allocations_frame(self) -> pd.DataFrame:
        """Per-step strategy weights."""
        rows = []
        for state, weights in zip(self.states, self.allocations):
            row = {"date": state.timestamp}
            row.update(weights.as_dict())
            rows.append(row)
        return pd.DataFrame(rows, columns=["date", *[s.value for s in STRATEGIES]])

    def performance_frame(self) -> pd.DataFrame:
        """Benchmark and portfolio cumulative curves with regime labels."""
        return pd.DataFrame({
            "date": [p.date for p in self.performance],
            "benchmark": [p.benchmark for p in self.performance],
            "adaptive_portfolio": [p.adaptive_portfolio for p in self.performance],
            "regime": [p.regime.value for p in self.performance],
        })

    def summary(self) -> dict:
        """JSON-friendly summary of the run."""
        latest = self.latest_allocation
        return {
            "n_periods": len(self.states),
            "current_regime": self.regimes[-1].value if self.states else None,
            "current_probabilities": (
                self.states[-1].distribution.as_dict() if self.states else None
            ),
            "latest_allocation": latest.to_records() if latest else [],
            "portfolio": _metrics(self.portfolio),
            "benchmark": _metrics(self.benchmark),
            "strategies": {
                s.value: {
                    "sharpe": p.sharpe,
                    "max_drawdown": p.max_drawdown,
                    "volatility": p.volatility,
                    "regime_performance": {
                        r.value: {"returns": rp.mean_return, "sharpe": rp.sharpe}
                        for r, rp in p.regime_performance.items()
                    },
                }
                for s, p in self.strategy_performance.items()
            },
        }


def _metrics(summary: PortfolioSummary) -> dict:
    return {
        "total_return": summary.total_return,
        "sharpe": summary.sharpe,
        "max_drawdown": summary.max_drawdown,
        "volatility": summary.volatility,
    }


class RegimeAllocationPipeline:
    """Runs regime detection, allocation, simulation and composition."""

    def __init__(
        self,
        window: int | None = None,
        seed: int | None = None,
        noise_amplitude: float | None = None,
        regime_filter: RegimeFilter | None = None,
        periods_per_year: int | None = None,
    ):
        """
        Args:
            window: Trailing returns per observation window
            seed: Seed for the simulation noise generator
            noise_amplitude: Half-width of the uniform simulation noise
            regime_filter: Filter to use (defaults to the fixed configuration)
            periods_per_year: Annualization factor for Sharpe and volatility
        """
        self.window = window if window is not None else settings.window_length
        self.seed = seed if seed is not None else settings.random_seed
        self.noise_amplitude = (
            noise_amplitude if noise_amplitude is not None else settings.noise_amplitude
        )
        self.regime_filter = regime_filter or RegimeFilter()
        self.periods_per_year = (
            periods_per_year if periods_per_year is not None else settings.trading_days_per_year
        )
        if self.periods_per_year < 1:
            raise ValueError(f"periods_per_year must be positive, got {self.periods_per_year}")

    def run(
        self,
        observations: Sequence[MarketObservation],
        rng: np.random.Generator | None = None,
    ) -> PipelineResult:
        """
        Run the full pipeline over daily observations.

        Args:
            observations: Daily market records in time order
            rng: Random source for the simulation noise (overrides seed)

        Returns:
            PipelineResult
        """
        logger.info(
            "Running regime allocation pipeline",
            n_observations=len(observations),
            window=self.window,
            seed=self.seed,
        )

        try:
            windows = build_observation_windows(observations, self.window)
            states = self.regime_filter.detect(windows)
            allocations = allocate_over_time(states)

            # Filter states line up with observations from index `window` on
            aligned = list(observations[self.window:])
            regimes = regime_sequence(states)

            performance = simulate(
                aligned,
                regimes,
                rng=rng,
                seed=self.seed,
                noise_amplitude=self.noise_amplitude,
                periods_per_year=self.periods_per_year,
            )

            portfolio = compose(
                {s: p.returns for s, p in performance.items()},
                [a.weights for a in allocations],
                self.periods_per_year,
            )
            benchmark = summarize_returns(
                [o.period_return for o in aligned], self.periods_per_year
            )
        except RegimeAllocError as e:
            logger.error("Pipeline failed", error=str(e))
            raise

        points = [
            PerformancePoint(
                date=obs.date,
                benchmark=float(bench),
                adaptive_portfolio=float(port),
                regime=regime,
            )
            for obs, bench, port, regime in zip(
                aligned, benchmark.cumulative, portfolio.cumulative, regimes, strict=True
            )
        ]

        result = PipelineResult(
            windows=windows,
            states=states,
            allocations=allocations,
            strategy_performance=performance,
            portfolio=portfolio,
            benchmark=benchmark,
            performance=points,
        )

        logger.info(
            "Pipeline complete",
            n_periods=len(states),
            current_regime=result.regimes[-1].value if states else None,
            total_return=portfolio.total_return,
            sharpe=portfolio.sharpe,
        )
        return result


def run_pipeline(
    observations: Sequence[MarketObservation],
    window: int | None = None,
    seed: int | None = None,
) -> PipelineResult:
    """
    Convenience function to run the pipeline with default settings.

    Args:
        observations: Daily market records in time order
        window: Trailing returns per window
        seed: Seed for the simulation noise

    Returns:
        PipelineResult
    """
    return RegimeAllocationPipeline(window=window, seed=seed).run(observations)
