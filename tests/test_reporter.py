import logging

import pytest

from roompi.state.reporter import LoggingReporter
from roompi.state.store import StatusStore
from roompi.status.models import StatusBundle


@pytest.fixture
def store() -> StatusStore:
    store = StatusStore()
    store.subscribe(LoggingReporter())
    return store


def test_logs_new_bundle_once(
    store: StatusStore, status_bundle: StatusBundle, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="roompi.state.reporter"):
        store.update(bundle=status_bundle, last_update=status_bundle.server_date)
        store.update(is_loading=False)

    updates = [r for r in caplog.records if r.getMessage().startswith("Updated")]
    assert len(updates) == 1
    assert "CPU 52.1 °C" in updates[0].getMessage()


def test_logs_error_changes(store: StatusStore, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="roompi.state.reporter"):
        store.update(error_message="offline")
        store.update(is_loading=True)
        store.update(error_message="still offline")

    messages = [r.getMessage() for r in caplog.records]
    assert messages == [
        "Status unavailable: offline",
        "Status unavailable: still offline",
    ]


def test_logs_device_errors(store: StatusStore, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="roompi.state.reporter"):
        store.begin_operation("boiler")
        store.set_device_error("boiler", "relay busy")
        store.end_operation("boiler")

    messages = [r.getMessage() for r in caplog.records]
    assert "Device boiler: command in flight" in messages
    assert messages.count("Device boiler: relay busy") == 1
