"""Typed models for the RoomPi status endpoint.

The server pre-formats most metrics as display strings; only the history
samples carry numeric values. Every block is decoded field by field so a
single odd value in a non-critical field does not reject the whole bundle.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, PrivateAttr, field_validator

from roompi.common.enums import StatusTone
from roompi.models.base import PayloadModel
from roompi.utils.time import TimeUtils

UNKNOWN_CSS_CLASS = "status-unknown"

# ─────────────────────────── snapshot ────────────────────────────────────────


class ServiceStatus(PayloadModel):
    """One monitored systemd-style service."""

    label: str
    service: str
    status: str
    css_class: str = Field(UNKNOWN_CSS_CLASS, alias="class")
    details: str | None = None

    _validate_css_class = PayloadModel.fallback_validator("css_class", UNKNOWN_CSS_CLASS)
    _validate_details = PayloadModel.fallback_validator("details", None)

    @property
    def id(self) -> str:
        """Stable identity: the service unit name, or the label if it is blank."""
        return self.service if self.service else self.label

    @property
    def tone(self) -> StatusTone:
        """Severity bucket used to colour the service."""
        return StatusTone.from_css_class(self.css_class)


class StatusSnapshot(PayloadModel):
    """Instantaneous host metrics as display strings."""

    time: str | None = None
    generated_at: datetime | None = None
    cpu_temperature: str | None = None
    system_load: str | None = None
    uptime: str | None = None
    memory_usage: str | None = None
    disk_usage: str | None = None
    services: list[ServiceStatus] = Field(default_factory=list)

    _validate_generated_at = PayloadModel.timestamp_validator("generated_at")


# ─────────────────────────── history ─────────────────────────────────────────


class TemperatureMetric(PayloadModel):
    value: float | None = None
    label: str | None = None


class PercentageMetric(PayloadModel):
    percentage: float | None = None
    label: str | None = None


class SystemLoadMetric(PayloadModel):
    one: float | None = None
    five: float | None = None
    fifteen: float | None = None
    label: str | None = None


class HistoryEntry(PayloadModel):
    """One historical sample of the host metrics."""

    generated_at: datetime | None = None
    time: str | None = None
    cpu_temperature: TemperatureMetric = Field(default_factory=TemperatureMetric)
    memory_usage: PercentageMetric = Field(default_factory=PercentageMetric)
    disk_usage: PercentageMetric = Field(default_factory=PercentageMetric)
    system_load: SystemLoadMetric = Field(default_factory=SystemLoadMetric)

    _token: str = PrivateAttr(default_factory=lambda: uuid.uuid4().hex)

    _validate_generated_at = PayloadModel.timestamp_validator("generated_at")

    @field_validator("cpu_temperature", "memory_usage", "disk_usage", "system_load", mode="before")
    @classmethod
    def null_metric_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def id(self) -> str:
        """Identity for list rendering.

        Samples are not guaranteed unique, so fall back from the timestamp to
        the time-of-day string and finally to a per-instance random token.
        """
        if self.generated_at is not None:
            return str(TimeUtils.datetime_to_epoch(self.generated_at))
        if self.time:
            return self.time
        return self._token


class HistoryMetric(Enum):
    """Metrics plotted from the history samples."""

    CPU_TEMPERATURE = "cpuTemperature"
    MEMORY_USAGE = "memoryUsage"
    DISK_USAGE = "diskUsage"
    SYSTEM_LOAD = "systemLoad"

    @property
    def title(self) -> str:
        return _METRIC_TITLES[self]

    def numeric_value(self, entry: HistoryEntry) -> float | None:
        """Extract the plottable value (1-minute average for system load)."""
        if self is HistoryMetric.CPU_TEMPERATURE:
            return entry.cpu_temperature.value
        if self is HistoryMetric.MEMORY_USAGE:
            return entry.memory_usage.percentage
        if self is HistoryMetric.DISK_USAGE:
            return entry.disk_usage.percentage
        return entry.system_load.one

    def formatted_label(self, entry: HistoryEntry) -> str | None:
        """Server-formatted label for this metric, if any."""
        if self is HistoryMetric.CPU_TEMPERATURE:
            return entry.cpu_temperature.label
        if self is HistoryMetric.MEMORY_USAGE:
            return entry.memory_usage.label
        if self is HistoryMetric.DISK_USAGE:
            return entry.disk_usage.label
        return entry.system_load.label


_METRIC_TITLES = {
    HistoryMetric.CPU_TEMPERATURE: "Temperature",
    HistoryMetric.MEMORY_USAGE: "Memory",
    HistoryMetric.DISK_USAGE: "Disk",
    HistoryMetric.SYSTEM_LOAD: "Load",
}


class HistoryPayload(PayloadModel):
    """Recent metric samples kept by the server."""

    generated_at: datetime | None = None
    enabled: bool
    max_entries: int
    max_age: int | None = None
    count: int
    limit: int | None = None
    entries: list[HistoryEntry] = Field(default_factory=list)

    _validate_generated_at = PayloadModel.timestamp_validator("generated_at")

    @property
    def is_available(self) -> bool:
        """True when history is enabled and at least one sample exists."""
        return self.enabled and bool(self.entries)

    def series(self, metric: HistoryMetric) -> list[tuple[str, float]]:
        """Return ``(entry id, value)`` pairs for samples that carry the metric.

        Args:
            metric: Which metric to extract

        Returns:
            Ordered list of points, skipping samples without a numeric value
        """
        points: list[tuple[str, float]] = []
        for entry in self.entries:
            value = metric.numeric_value(entry)
            if value is not None:
                points.append((entry.id, value))
        return points


# ─────────────────────────── shelly devices ──────────────────────────────────


class ShellyControl(PayloadModel):
    """Per-device control URLs supplied by the server."""

    turn_on: str | None = Field(None, alias="turn_on")
    turn_off: str | None = Field(None, alias="turn_off")
    toggle: str | None = None


class ShellyDevice(PayloadModel):
    """A remotely controllable smart switch."""

    id: str
    label: str
    state: str
    description: str | None = None
    error: str | None = None
    ok: bool
    control: ShellyControl | None = None
    supports_control: bool | None = None

    @property
    def is_on(self) -> bool:
        return self.state.lower() == "on"

    @property
    def allows_control(self) -> bool:
        """Whether the device can be switched from the client.

        An explicit ``supportsControl`` wins. Otherwise a control block must
        offer either a toggle URL or both directional URLs. Devices without a
        control block fall back to the generic command endpoint.
        """
        if self.supports_control is not None:
            return self.supports_control

        if self.control is not None:
            return self.control.toggle is not None or (
                self.control.turn_on is not None and self.control.turn_off is not None
            )

        return True


class ShellyPayload(PayloadModel):
    """Device list envelope."""

    generated_at: datetime | None = None
    count: int
    has_errors: bool
    devices: list[ShellyDevice] = Field(default_factory=list)
    config_error: bool
    http_status: int | None = None
    error: str | None = None
    message: str | None = None

    _validate_generated_at = PayloadModel.timestamp_validator("generated_at")

    def device(self, device_id: str) -> ShellyDevice | None:
        """Look up a device by id."""
        return next((d for d in self.devices if d.id == device_id), None)


class ShellyCommandResponse(PayloadModel):
    """Acknowledgement returned by a control command.

    Device firmwares differ wildly, so a missing ``success`` flag counts as
    success.
    """

    success: bool | None = None
    message: str | None = None
    state: str | None = None

    @property
    def is_successful(self) -> bool:
        return True if self.success is None else self.success

    @classmethod
    def success_placeholder(cls) -> ShellyCommandResponse:
        """Response used when the device acknowledged with an empty body."""
        return cls(success=True)


# ─────────────────────────── bundle ──────────────────────────────────────────


class StatusBundle(PayloadModel):
    """One complete status payload returned by a single fetch."""

    generated_at: datetime | None = None
    stream_interval: int
    snapshot: StatusSnapshot
    history: HistoryPayload
    shelly: ShellyPayload

    _validate_generated_at = PayloadModel.timestamp_validator("generated_at")

    @property
    def server_date(self) -> datetime | None:
        """Snapshot timestamp, falling back to the bundle timestamp."""
        return self.snapshot.generated_at or self.generated_at
