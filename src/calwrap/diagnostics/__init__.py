"""Diagnostics package.

- pretty_month: always available, plain-text month grid
- moon_scatter: optional (requires the diagnostics extras: numpy, matplotlib)
"""

__all__ = ["pretty_month", "moon_scatter"]
