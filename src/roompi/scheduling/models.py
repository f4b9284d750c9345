"""Data models for polling cadence settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PollSettings:
    """Timing policy for the status poll loop.

    The server dictates the poll interval through ``streamInterval``; it is
    clamped into [min_interval, max_interval]. Until the first bundle
    arrives the loop waits ``fallback_interval`` between attempts.
    """

    fallback_interval: float = 5.0
    min_interval: float = 1.0
    max_interval: float = 60.0
    wait_tick: float = 0.1  # silent refresh re-check period while a visible one runs
    history_limit: int | None = 120
