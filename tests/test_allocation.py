"""Tests for regime-conditioned strategy allocation."""

import numpy as np
import pytest

from regime_alloc.errors import DegenerateAllocationError
from regime_alloc.regime.filter import detect_regimes
from regime_alloc.regime.types import REGIMES, ObservationWindow, Regime, RegimeDistribution
from regime_alloc.strategies.allocation import (
    AllocationWeights,
    allocate,
    allocate_over_time,
)
from regime_alloc.strategies.profiles import (
    STRATEGIES,
    STRATEGY_PROFILES,
    Strategy,
    StrategyProfile,
)


def point_mass(regime: Regime) -> RegimeDistribution:
    return RegimeDistribution({r: 1.0 if r is regime else 0.0 for r in REGIMES})


class TestProfiles:
    """Tests for the fixed factor table."""

    def test_factor_table(self):
        assert STRATEGY_PROFILES[Strategy.MOMENTUM].factor(Regime.BULL) == 1.5
        assert STRATEGY_PROFILES[Strategy.MEAN_REVERSION].factor(Regime.NEUTRAL) == 1.4
        assert STRATEGY_PROFILES[Strategy.VOLATILITY].factor(Regime.VOLATILE) == 1.8
        assert STRATEGY_PROFILES[Strategy.VALUE_INVESTING].factor(Regime.BEAR) == 1.1

    def test_all_strategies_profiled(self):
        assert set(STRATEGY_PROFILES) == set(STRATEGIES)

    def test_profile_requires_all_regimes(self):
        with pytest.raises(ValueError, match="missing regimes"):
            StrategyProfile(
                name=Strategy.MOMENTUM,
                factors={Regime.BULL: 1.0},
                color="#000000",
            )


class TestAllocate:
    """Tests for a single allocation."""

    def test_uniform_distribution(self):
        weights = allocate(RegimeDistribution.uniform())

        # Raw weights are the factor means: 0.925, 1.025, 1.0, 1.05 (total 4.0)
        assert weights[Strategy.MOMENTUM] == pytest.approx(0.925 / 4.0)
        assert weights[Strategy.MEAN_REVERSION] == pytest.approx(1.025 / 4.0)
        assert weights[Strategy.VOLATILITY] == pytest.approx(1.0 / 4.0)
        assert weights[Strategy.VALUE_INVESTING] == pytest.approx(1.05 / 4.0)

    def test_bull_favors_momentum(self):
        weights = allocate(point_mass(Regime.BULL))

        assert weights[Strategy.MOMENTUM] == pytest.approx(1.5 / 3.6)
        assert max(weights, key=weights.get) is Strategy.MOMENTUM

    def test_volatile_favors_volatility(self):
        weights = allocate(point_mass(Regime.VOLATILE))
        assert max(weights, key=weights.get) is Strategy.VOLATILITY

    def test_weights_sum_to_one(self):
        rng = np.random.default_rng(1)
        for _ in range(100):
            dist = RegimeDistribution.from_array(rng.dirichlet(np.ones(4)))
            weights = allocate(dist)
            values = np.array(list(weights.weights.values()))
            assert np.all(values >= 0)
            assert abs(values.sum() - 1.0) < 1e-9

    def test_zero_factors_are_degenerate(self):
        profiles = {
            s: StrategyProfile(name=s, factors={r: 0.0 for r in REGIMES}, color="#000000")
            for s in STRATEGIES
        }
        with pytest.raises(DegenerateAllocationError):
            allocate(RegimeDistribution.uniform(), profiles)

    def test_to_records(self):
        records = allocate(RegimeDistribution.uniform()).to_records()

        assert [r["name"] for r in records] == [s.value for s in STRATEGIES]
        assert records[0]["color"] == "#3b82f6"
        assert sum(r["weight"] for r in records) == pytest.approx(1.0)


class TestAllocateOverTime:

    def test_one_allocation_per_state(self):
        windows = [
            ObservationWindow(timestamp=None, returns=(0.02,) * 5, volatility=0.01),
            ObservationWindow(timestamp=None, returns=(0.0,) * 5, volatility=0.04),
        ]
        states = detect_regimes(windows)
        allocations = allocate_over_time(states)

        assert len(allocations) == 2
        assert allocations[0][Strategy.MOMENTUM] > allocations[1][Strategy.MOMENTUM]


class TestAllocationWeights:

    def test_rejects_bad_sum(self):
        with pytest.raises(ValueError, match="sum to 1"):
            AllocationWeights({Strategy.MOMENTUM: 0.5, Strategy.VOLATILITY: 0.2})

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            AllocationWeights({Strategy.MOMENTUM: 1.5, Strategy.VOLATILITY: -0.5})

    def test_get_defaults_to_zero(self):
        weights = AllocationWeights({Strategy.MOMENTUM: 1.0})
        assert weights.get(Strategy.VOLATILITY) == 0.0
