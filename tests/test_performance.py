"""Tests for return/risk statistics."""

import numpy as np
import pytest

from regime_alloc.statistics.performance import (
    annualized_volatility,
    cumulative_returns,
    max_drawdown,
    sharpe_ratio,
)


class TestSharpe:

    def test_constant_zero_series(self):
        assert sharpe_ratio([0.0] * 50) == 0.0

    def test_empty_series(self):
        assert sharpe_ratio([]) == 0.0

    def test_single_point(self):
        """One observation has zero dispersion."""
        assert sharpe_ratio([0.02]) == 0.0

    def test_population_std(self):
        # mean 0.02, population std 0.01
        assert sharpe_ratio([0.01, 0.03]) == pytest.approx(2 * np.sqrt(252))

    def test_sign_follows_mean(self):
        assert sharpe_ratio([-0.01, -0.03]) < 0

    def test_custom_annualization(self):
        assert sharpe_ratio([0.01, 0.03], periods_per_year=1) == pytest.approx(2.0)


class TestMaxDrawdown:

    def test_reference_path(self):
        # Equity 1, 1.1, 1.045, 0.99275, 1.1913: peak 1.1, trough 0.99275
        dd = max_drawdown([0.1, -0.05, -0.05, 0.2])
        assert dd == pytest.approx((1.1 - 0.99275) / 1.1)
        assert dd == pytest.approx(0.0975)

    def test_empty(self):
        assert max_drawdown([]) == 0.0

    def test_monotonic_gains(self):
        assert max_drawdown([0.01, 0.02, 0.03]) == 0.0

    def test_loss_from_start(self):
        """Initial equity of 1.0 counts as the first peak."""
        assert max_drawdown([-0.2, 0.1]) == pytest.approx(0.2)

    def test_largest_of_several(self):
        dd = max_drawdown([-0.1, 0.5, -0.3, 0.1])
        assert dd == pytest.approx(0.3)


class TestVolatility:

    def test_fewer_than_two_points(self):
        assert annualized_volatility([]) == 0.0
        assert annualized_volatility([0.05]) == 0.0

    def test_population_std_annualized(self):
        assert annualized_volatility([0.01, 0.03]) == pytest.approx(0.01 * np.sqrt(252))


class TestCumulativeReturns:

    def test_matches_equity_curve(self):
        rng = np.random.default_rng(3)
        returns = rng.normal(0.0005, 0.01, size=250)

        equity = [1.0]
        for r in returns:
            equity.append(equity[-1] * (1 + r))

        np.testing.assert_allclose(
            cumulative_returns(returns), np.array(equity[1:]) - 1.0, rtol=1e-12
        )

    def test_recursive_definition(self):
        returns = [0.1, -0.05, 0.02]
        cumulative = cumulative_returns(returns)

        previous = 0.0
        for r, c in zip(returns, cumulative):
            assert c == pytest.approx((1 + previous) * (1 + r) - 1)
            previous = c

    def test_empty(self):
        assert len(cumulative_returns([])) == 0
