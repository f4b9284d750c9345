"""Enumerations shared across the roompi package."""

from roompi.common.enums import ShellyCommand, StatusTone

__all__ = ["ShellyCommand", "StatusTone"]
