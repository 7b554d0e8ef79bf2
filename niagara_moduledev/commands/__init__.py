"""CLI command groups for moduledev."""

__all__ = [
    "config",
    "temp",
]
