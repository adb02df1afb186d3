"""Exceptions raised for caller-misuse conditions.

Degenerate data (empty series, flat values, odd gait percentages) never
raises; it yields empty geometry or ``None`` results instead.
"""

from __future__ import annotations


class RunAnalyticsError(Exception):
    """Base class for run_analytics errors."""


class SeriesAlignmentError(RunAnalyticsError, ValueError):
    """Series drawn on a shared axis have different sample counts."""

    def __init__(self, counts):
        self.counts = list(counts)
        super().__init__(
            f"Series on a shared axis must have equal sample counts, got {self.counts}"
        )


class ConfigError(RunAnalyticsError, ValueError):
    """An environment override could not be parsed."""
