"""Tests for portfolio composition."""

import numpy as np
import pytest

from regime_alloc.errors import LengthMismatchError
from regime_alloc.portfolio.metrics import compose, summarize_returns
from regime_alloc.regime.types import RegimeDistribution
from regime_alloc.statistics.performance import max_drawdown, sharpe_ratio
from regime_alloc.strategies.allocation import allocate
from regime_alloc.strategies.profiles import Strategy

MOM = Strategy.MOMENTUM
VOL = Strategy.VOLATILITY


def equal_weights(n: int) -> list[dict]:
    return [{MOM: 0.5, VOL: 0.5} for _ in range(n)]


class TestCompose:

    def test_weighted_sum(self):
        summary = compose(
            {MOM: [0.02, -0.01], VOL: [0.0, 0.03]},
            [{MOM: 0.25, VOL: 0.75}, {MOM: 1.0, VOL: 0.0}],
        )
        np.testing.assert_allclose(summary.returns, [0.005, -0.01])

    def test_missing_value_omits_period(self):
        strategy_returns = {
            MOM: [0.01, 0.02, 0.03, 0.04, 0.05],
            VOL: [0.01, 0.02, 0.03, None, 0.05],
        }
        summary = compose(strategy_returns, equal_weights(5))

        assert len(summary.returns) == 4
        np.testing.assert_allclose(summary.returns, [0.01, 0.02, 0.03, 0.05])

    def test_nan_counts_as_missing(self):
        summary = compose(
            {MOM: [0.01, np.nan, 0.02], VOL: [0.01, 0.01, 0.02]},
            equal_weights(3),
        )
        assert len(summary.returns) == 2

    def test_zero_return_is_kept(self):
        summary = compose(
            {MOM: [0.0, 0.01, 0.0], VOL: [0.0, 0.01, 0.02]},
            equal_weights(3),
        )
        np.testing.assert_allclose(summary.returns, [0.0, 0.01, 0.01])

    def test_missing_weight_counts_as_zero(self):
        summary = compose({MOM: [0.02], VOL: [0.04]}, [{MOM: 1.0}])
        np.testing.assert_allclose(summary.returns, [0.02])

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            compose({MOM: [0.01, 0.02], VOL: [0.01]}, equal_weights(2))

    def test_accepts_allocation_weights(self):
        weights = allocate(RegimeDistribution.uniform())
        strategy_returns = {s: [0.01, 0.02] for s in weights}

        summary = compose(strategy_returns, [weights, weights])
        np.testing.assert_allclose(summary.returns, [0.01, 0.02])

    def test_cumulative_curve_and_metrics(self):
        returns = [0.1, -0.05, -0.05, 0.2]
        summary = compose({MOM: returns}, [{MOM: 1.0}] * 4)

        equity = np.cumprod(1 + np.array(returns))
        np.testing.assert_allclose(summary.cumulative, equity - 1)
        assert summary.total_return == pytest.approx(equity[-1] - 1)
        assert summary.max_drawdown == pytest.approx(0.0975)
        assert summary.sharpe == pytest.approx(sharpe_ratio(returns))

    def test_empty(self):
        summary = compose({MOM: []}, [])
        assert summary.total_return == 0.0
        assert summary.sharpe == 0.0
        assert summary.max_drawdown == 0.0
        assert summary.volatility == 0.0

    def test_weighted_strategy_without_series(self):
        with pytest.raises(LengthMismatchError, match="momentum"):
            compose({"momentum": [0.05, 0.05]}, [{MOM: 1.0}] * 2)

    def test_zero_weight_strategy_without_series(self):
        summary = compose({VOL: [0.01, 0.02]}, [{MOM: 0.0, VOL: 1.0}] * 2)
        np.testing.assert_allclose(summary.returns, [0.01, 0.02])


class TestSummarizeReturns:

    def test_round_trip_with_direct_compounding(self):
        rng = np.random.default_rng(11)
        returns = rng.normal(0.0003, 0.012, size=300)
        summary = summarize_returns(returns)

        equity = 1.0
        for r, c in zip(returns, summary.cumulative):
            equity *= 1 + r
            assert c == pytest.approx(equity - 1, abs=1e-12)

        assert summary.max_drawdown == pytest.approx(max_drawdown(returns))

    def test_to_dict(self):
        payload = summarize_returns([0.01, -0.01]).to_dict()
        assert set(payload) == {
            "returns", "cumulative", "total_return", "sharpe", "max_drawdown", "volatility",
        }
