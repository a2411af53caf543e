"""Portfolio composition and summary metrics."""

from .metrics import PortfolioSummary, compose, summarize_returns

__all__ = ["PortfolioSummary", "compose", "summarize_returns"]
