"""Fixed-rate amortization schedules stored in an embedded database."""

__version__ = "0.1.0"
