"""Logging observer that narrates dashboard state changes."""

from __future__ import annotations

import logging
from typing import Final

from roompi.state.store import DashboardState
from roompi.utils.formatting import format_last_update

logger: Final = logging.getLogger(__name__)


class LoggingReporter:
    """StateObserver that logs what changed between two snapshots.

    Used by the CLI as a headless stand-in for a dashboard view.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger
        self._previous = DashboardState()

    def __call__(self, state: DashboardState) -> None:
        previous, self._previous = self._previous, state

        if state.error_message and state.error_message != previous.error_message:
            self.log.error("Status unavailable: %s", state.error_message)

        if state.bundle is not None and state.bundle is not previous.bundle:
            snapshot = state.bundle.snapshot
            self.log.info(
                "Updated %s | CPU %s | load %s | mem %s | disk %s",
                format_last_update(state.last_update),
                snapshot.cpu_temperature or "-",
                snapshot.system_load or "-",
                snapshot.memory_usage or "-",
                snapshot.disk_usage or "-",
            )

        for device_id, message in state.control_errors.items():
            if previous.control_errors.get(device_id) != message:
                self.log.warning("Device %s: %s", device_id, message)

        for device_id in state.operations - previous.operations:
            self.log.debug("Device %s: command in flight", device_id)
