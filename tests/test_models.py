"""Tests for status payload models.

These tests verify that:
1. The sample status bundle parses correctly
2. Non-critical fields fall back to defaults instead of failing
3. Required fields still reject malformed records
4. Derived properties (identity, control support, history series) behave
"""

from datetime import datetime, timezone
from typing import Any, Callable

import pytest
from pydantic import ValidationError

from roompi.common.enums import StatusTone
from roompi.status.models import (
    HistoryEntry,
    HistoryMetric,
    HistoryPayload,
    ServiceStatus,
    ShellyCommandResponse,
    ShellyDevice,
    StatusBundle,
)


def test_status_bundle_validation(status_bundle: StatusBundle) -> None:
    """StatusBundle should parse the sample without errors."""
    assert status_bundle.stream_interval == 5
    assert status_bundle.snapshot.cpu_temperature == "52.1 °C"
    assert [s.id for s in status_bundle.snapshot.services] == [
        "nginx.service",
        "php8.2-fpm.service",
        "mosquitto.service",
    ]
    assert status_bundle.history.is_available
    assert [d.id for d in status_bundle.shelly.devices] == ["boiler", "gate"]
    assert status_bundle.shelly.devices[0].control is not None
    assert status_bundle.shelly.devices[0].control.turn_off.endswith("command=off")


def test_server_date_prefers_snapshot(status_bundle: StatusBundle) -> None:
    assert status_bundle.server_date == datetime(2025, 5, 3, 12, 0, 1, tzinfo=timezone.utc)


def test_server_date_falls_back_to_bundle(payload_factory: Callable[..., dict[str, Any]]) -> None:
    payload = payload_factory()
    payload["snapshot"]["generatedAt"] = ""
    bundle = StatusBundle.model_validate(payload)
    assert bundle.snapshot.generated_at is None
    assert bundle.server_date == datetime(2025, 5, 3, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw_class", [None, 42, {"color": "red"}, ["status-ok"]])
def test_service_css_class_falls_back(raw_class: object) -> None:
    service = ServiceStatus.model_validate(
        {"label": "Nginx", "service": "nginx.service", "status": "Active", "class": raw_class}
    )
    assert service.css_class == "status-unknown"
    assert service.tone is StatusTone.UNKNOWN


def test_service_css_class_missing() -> None:
    service = ServiceStatus.model_validate({"label": "Nginx", "service": "", "status": "Active"})
    assert service.css_class == "status-unknown"
    assert service.id == "Nginx"


def test_service_details_tolerates_bad_type() -> None:
    service = ServiceStatus.model_validate(
        {"label": "MQTT", "service": "mosquitto", "status": "Failed", "details": {"code": 1}}
    )
    assert service.details is None


@pytest.mark.parametrize("missing", ["label", "service", "status"])
def test_service_required_fields(missing: str) -> None:
    raw = {"label": "Nginx", "service": "nginx.service", "status": "Active", "class": "status-ok"}
    raw.pop(missing)
    with pytest.raises(ValidationError):
        ServiceStatus.model_validate(raw)


def test_malformed_service_fails_whole_bundle(
    payload_factory: Callable[..., dict[str, Any]],
) -> None:
    payload = payload_factory()
    del payload["snapshot"]["services"][0]["status"]
    with pytest.raises(ValidationError):
        StatusBundle.model_validate(payload)


def test_bad_css_class_does_not_fail_bundle(
    payload_factory: Callable[..., dict[str, Any]],
) -> None:
    payload = payload_factory()
    payload["snapshot"]["services"][1]["class"] = 7
    bundle = StatusBundle.model_validate(payload)
    assert bundle.snapshot.services[1].css_class == "status-unknown"
    assert bundle.snapshot.services[0].tone is StatusTone.OK
    assert bundle.snapshot.services[2].tone is StatusTone.ERROR


def _device(**fields: Any) -> ShellyDevice:
    raw: dict[str, Any] = {"id": "boiler", "label": "Boiler", "state": "off", "ok": True}
    raw.update(fields)
    return ShellyDevice.model_validate(raw)


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"supportsControl": False, "control": {"toggle": "http://x/t"}}, False),
        ({"supportsControl": True, "control": {}}, True),
        ({"control": {"toggle": "http://x/t"}}, True),
        ({"control": {"turn_on": "http://x/on", "turn_off": "http://x/off"}}, True),
        ({"control": {"turn_on": "http://x/on"}}, False),
        ({"control": {}}, False),
        ({}, True),
    ],
)
def test_allows_control_truth_table(fields: dict[str, Any], expected: bool) -> None:
    assert _device(**fields).allows_control is expected


@pytest.mark.parametrize("state, expected", [("on", True), ("ON", True), ("On", True), ("off", False), ("", False)])
def test_device_is_on(state: str, expected: bool) -> None:
    assert _device(state=state).is_on is expected


def test_history_entry_identity() -> None:
    stamped = HistoryEntry.model_validate({"generatedAt": "2025-05-03T12:00:00Z", "time": "12:00"})
    timed = HistoryEntry.model_validate({"time": "12:00"})
    anonymous_a = HistoryEntry.model_validate({})
    anonymous_b = HistoryEntry.model_validate({})

    assert stamped.id == str(datetime(2025, 5, 3, 12, tzinfo=timezone.utc).timestamp())
    assert timed.id == "12:00"
    assert anonymous_a.id == anonymous_a.id
    assert anonymous_a.id != anonymous_b.id


def test_history_entry_metrics_optional() -> None:
    entry = HistoryEntry.model_validate({"cpuTemperature": None, "memoryUsage": {"label": "1 GB"}})
    assert entry.cpu_temperature.value is None
    assert entry.memory_usage.percentage is None
    assert entry.memory_usage.label == "1 GB"
    assert HistoryMetric.SYSTEM_LOAD.numeric_value(entry) is None


def test_history_is_available() -> None:
    disabled = HistoryPayload.model_validate(
        {"enabled": False, "maxEntries": 10, "count": 1, "entries": [{"time": "1"}]}
    )
    empty = HistoryPayload.model_validate({"enabled": True, "maxEntries": 10, "count": 0, "entries": []})
    assert disabled.is_available is False
    assert empty.is_available is False


def test_history_series(status_bundle: StatusBundle) -> None:
    history = status_bundle.history
    temps = history.series(HistoryMetric.CPU_TEMPERATURE)
    assert [value for _, value in temps] == [48.2, 52.1]
    assert history.series(HistoryMetric.SYSTEM_LOAD)[0][1] == 0.65
    assert HistoryMetric.DISK_USAGE.formatted_label(history.entries[0]) == "29 / 64 GB"
    assert HistoryMetric.MEMORY_USAGE.title == "Memory"


@pytest.mark.parametrize(
    "raw, successful",
    [
        ({}, True),
        ({"success": None}, True),
        ({"success": True, "state": "on"}, True),
        ({"success": False, "message": "relay busy"}, False),
    ],
)
def test_command_response_success_default(raw: dict[str, Any], successful: bool) -> None:
    assert ShellyCommandResponse.model_validate(raw).is_successful is successful


def test_bundle_is_frozen(status_bundle: StatusBundle) -> None:
    with pytest.raises(ValidationError):
        status_bundle.stream_interval = 10  # type: ignore[misc]
