"""Fixed-grid text tile editing engine."""

__all__ = [
    "adapters",
    "grid",
    "runtime",
    "session",
    "storage",
]

__version__ = "0.1.0"
