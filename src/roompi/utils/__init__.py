"""Common utility functions and helpers for the roompi package."""

from roompi.utils.time import TimeUtils

__all__ = ["TimeUtils"]
