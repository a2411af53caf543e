"""
Forward Filter for Regime Detection

Recursive regime-probability estimation over a stream of
observation windows:
1. Score each window with a fixed heuristic likelihood table
2. Propagate the previous belief through the transition matrix
3. Weight by the likelihood and renormalize

The likelihood table is a rule set, not a fitted emission model.
"""

from typing import Callable, Iterable, Sequence

import numpy as np
import structlog

from regime_alloc.errors import DegenerateDistributionError
from .types import (
    REGIMES,
    TRANSITION_MATRIX,
    FilterState,
    ObservationWindow,
    Regime,
    RegimeDistribution,
    validate_transition_matrix,
)

logger = structlog.get_logger()

HIGH_VOLATILITY_THRESHOLD = 0.025
BULL_RETURN_THRESHOLD = 0.01
BEAR_RETURN_THRESHOLD = -0.01

# Unnormalized likelihood vectors, one per rule
VOLATILE_LIKELIHOOD = {
    Regime.BULL: 0.1, Regime.BEAR: 0.2, Regime.NEUTRAL: 0.1, Regime.VOLATILE: 0.6,
}
BULL_LIKELIHOOD = {
    Regime.BULL: 0.7, Regime.BEAR: 0.05, Regime.NEUTRAL: 0.2, Regime.VOLATILE: 0.05,
}
BEAR_LIKELIHOOD = {
    Regime.BULL: 0.05, Regime.BEAR: 0.7, Regime.NEUTRAL: 0.1, Regime.VOLATILE: 0.15,
}
NEUTRAL_LIKELIHOOD = {
    Regime.BULL: 0.2, Regime.BEAR: 0.1, Regime.NEUTRAL: 0.6, Regime.VOLATILE: 0.1,
}

LikelihoodFn = Callable[[ObservationWindow], np.ndarray]


def observation_likelihood(window: ObservationWindow) -> np.ndarray:
    """
    Heuristic likelihood of each regime given one window.

    Rules are checked in order and the first match wins: high volatility,
    strong positive average return, strong negative average return,
    otherwise neutral.

    Returns:
        Unnormalized likelihoods in canonical regime order
    """
    avg_return = window.average_return

    if window.volatility > HIGH_VOLATILITY_THRESHOLD:
        table = VOLATILE_LIKELIHOOD
    elif avg_return > BULL_RETURN_THRESHOLD:
        table = BULL_LIKELIHOOD
    elif avg_return < BEAR_RETURN_THRESHOLD:
        table = BEAR_LIKELIHOOD
    else:
        table = NEUTRAL_LIKELIHOOD

    return np.array([table[r] for r in REGIMES])


def filter_step(
    prior: RegimeDistribution,
    window: ObservationWindow,
    transition_matrix: np.ndarray = TRANSITION_MATRIX,
    likelihood: LikelihoodFn = observation_likelihood,
) -> RegimeDistribution:
    """
    One forward-filter update.

    posterior[to] = sum_from prior[from] * A[from, to] * obs[to], normalized.

    Raises:
        DegenerateDistributionError: If the unnormalized posterior has zero
            or non-finite mass
    """
    obs = np.asarray(likelihood(window), dtype=float)
    posterior = (prior.to_array() @ transition_matrix) * obs

    total = np.sum(posterior)
    if not np.isfinite(total) or total <= 0:
        raise DegenerateDistributionError(
            f"Cannot normalize posterior with total mass {total}"
        )

    return RegimeDistribution.from_array(posterior / total)


class RegimeFilter:
    """
    Forward filter over a sequence of observation windows.

    Only the previous posterior is carried between steps, so the filter
    itself holds configuration and no running state.
    """

    def __init__(
        self,
        transition_matrix: np.ndarray | None = None,
        initial_distribution: RegimeDistribution | None = None,
        likelihood: LikelihoodFn = observation_likelihood,
    ):
        """
        Args:
            transition_matrix: 4x4 row-stochastic table (defaults to the
                fixed market table)
            initial_distribution: Belief before the first window
                (defaults to uniform)
            likelihood: Maps a window to unnormalized regime likelihoods
        """
        if transition_matrix is None:
            self.transition_matrix = TRANSITION_MATRIX
        else:
            self.transition_matrix = validate_transition_matrix(transition_matrix)
        self.initial_distribution = initial_distribution or RegimeDistribution.uniform()
        self.likelihood = likelihood

    def step(
        self, prior: RegimeDistribution, window: ObservationWindow
    ) -> RegimeDistribution:
        return filter_step(prior, window, self.transition_matrix, self.likelihood)

    def detect(self, windows: Iterable[ObservationWindow]) -> list[FilterState]:
        """
        Run the filter over ``windows`` in order.

        Returns:
            One FilterState per window, in input order
        """
        prior = self.initial_distribution
        states: list[FilterState] = []

        for window in windows:
            posterior = self.step(prior, window)
            most_likely = posterior.most_likely()
            states.append(FilterState(
                timestamp=window.timestamp,
                distribution=posterior,
                most_likely=most_likely,
            ))
            logger.debug(
                "Filter step",
                timestamp=window.timestamp,
                regime=most_likely.value,
                probability=posterior[most_likely],
            )
            prior = posterior

        logger.info("Regime detection complete", n_windows=len(states))
        return states


def detect_regimes(windows: Sequence[ObservationWindow]) -> list[FilterState]:
    """
    Convenience function to filter windows with the default configuration.

    Args:
        windows: Observation windows in time order

    Returns:
        List of FilterState
    """
    return RegimeFilter().detect(windows)


def regime_sequence(states: Sequence[FilterState]) -> list[Regime]:
    """Most likely regime at each step."""
    return [s.most_likely for s in states]
