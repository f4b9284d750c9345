# src/roompi/utils/time.py
"""Time and date handling utilities."""

from __future__ import annotations

from datetime import UTC, datetime


class TimeUtils:
    """Time-related utility functions.

    Centralized utilities for working with dates and times:
    - Current time retrieval with proper timezone handling
    - Epoch conversion for history sample identity
    - Interval clamping for the poll loop
    """

    @staticmethod
    def now_localized() -> datetime:
        """Get current datetime with local timezone.

        Returns:
            Current datetime with local timezone
        """
        return datetime.now(UTC).astimezone()

    @staticmethod
    def datetime_to_epoch(dt: datetime) -> float:
        """Convert datetime to epoch seconds.

        Args:
            dt: Datetime object (assumes UTC timezone if not specified)

        Returns:
            Epoch seconds, fractional part preserved
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.timestamp()

    @staticmethod
    def clamp_seconds(value: float, lower: float, upper: float) -> float:
        """Clamp an interval in seconds to the closed range [lower, upper]."""
        return min(max(value, lower), upper)
