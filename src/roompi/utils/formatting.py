"""Text formatting utilities for console output."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roompi.status.models import ServiceStatus, ShellyDevice


def format_last_update(dt: datetime | None, fmt: str = "%H:%M:%S") -> str:
    """Format the last update time in local time.

    Args:
        dt: Timestamp, or None if nothing has been fetched yet
        fmt: strftime format

    Returns:
        Formatted time, or "never"
    """
    if dt is None:
        return "never"
    return dt.astimezone().strftime(fmt)


def format_service_line(service: ServiceStatus) -> str:
    """One-line summary of a monitored service."""
    line = f"{service.label}: {service.status} [{service.tone.value}]"
    if service.details:
        line += f" - {service.details}"
    return line


def format_device_line(device: ShellyDevice, error: str | None = None) -> str:
    """One-line summary of a Shelly device, with any command error appended."""
    line = f"{device.label} ({device.id}): {device.state}"
    if not device.allows_control:
        line += " (read-only)"
    if device.error:
        line += f" - {device.error}"
    if error:
        line += f" - command failed: {error}"
    return line
