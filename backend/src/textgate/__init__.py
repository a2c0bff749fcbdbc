"""Text analytics with plan-gated, metered capabilities."""

__version__ = "0.1.0"
