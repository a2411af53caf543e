"""
Regime Detection Module

Forward filter that tracks a probability distribution over four
market regimes from rolling return/volatility windows.
"""

from .filter import (
    RegimeFilter,
    detect_regimes,
    filter_step,
    observation_likelihood,
    regime_sequence,
)
from .types import (
    REGIMES,
    TRANSITION_MATRIX,
    FilterState,
    ObservationWindow,
    Regime,
    RegimeDistribution,
)

__all__ = [
    # Filter
    "RegimeFilter",
    "detect_regimes",
    "filter_step",
    "observation_likelihood",
    "regime_sequence",
    # Types
    "REGIMES",
    "TRANSITION_MATRIX",
    "FilterState",
    "ObservationWindow",
    "Regime",
    "RegimeDistribution",
]
