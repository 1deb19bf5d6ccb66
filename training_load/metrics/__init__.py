"""Training load metrics: stress scoring, load curves, readiness and volume."""
