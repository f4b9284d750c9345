"""Shared model base classes."""

from roompi.models.base import PayloadModel

__all__ = ["PayloadModel"]
