"""Regime-adaptive strategy allocation."""

__version__ = "0.1.0"
