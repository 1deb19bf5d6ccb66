"""Training load and readiness analytics engine."""

__version__ = "0.1.0"
