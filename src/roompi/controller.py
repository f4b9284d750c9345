# filepath: src/roompi/controller.py
"""Core controller for the RoomPi status client."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Final

from roompi.scheduling import PollSettings, SyncEngine
from roompi.settings import UserSettings
from roompi.state.reporter import LoggingReporter
from roompi.state.store import DashboardState
from roompi.status.api import StatusAPI

logger: Final = logging.getLogger(__name__)


class DeviceNotFoundError(LookupError):
    """Raised when a device id is not present in the current bundle."""


class DashboardController:
    """Main controller class for the status client.

    Wires the pieces together:
    - Loading configuration
    - Creating the transport client and sync engine
    - Attaching a logging reporter in place of a dashboard view

    All dependencies can be injected, which keeps this the single place
    that knows how the application is assembled.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        config: UserSettings | None = None,
        status_api: StatusAPI | None = None,
        engine: SyncEngine | None = None,
        debug: bool = False,
    ):
        """Initialize the controller.

        Args:
            config_path: Path to config.yaml (searched for if None and no config given)
            config: Already-loaded settings, overrides config_path
            status_api: Optional custom transport client
            engine: Optional custom sync engine
            debug: Enable debug logging
        """
        # Configure logging
        logging.basicConfig(
            level=logging.DEBUG if debug else logging.INFO,
            format="%(asctime)s [%(levelname)s] %(message)s",
        )

        self.config: UserSettings = config or UserSettings.load(config_path)
        self.status_api = status_api or StatusAPI.from_settings(self.config)
        self.engine = engine or SyncEngine(
            self.status_api,
            PollSettings(
                fallback_interval=self.config.fallback_interval,
                history_limit=self.config.history_limit,
            ),
        )
        self.reporter = LoggingReporter()
        self._unsubscribe = self.engine.store.subscribe(self.reporter)

    @property
    def state(self) -> DashboardState:
        return self.engine.state

    async def run(self) -> None:
        """Poll until cancelled (Ctrl+C in the CLI)."""
        self.engine.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.engine.shutdown()

    async def refresh_once(self) -> DashboardState:
        """Fetch the status once and return the resulting state."""
        await self.engine.manual_refresh()
        return self.engine.state

    async def toggle(self, device_id: str) -> str | None:
        """Toggle one device by id.

        Args:
            device_id: Id of a device in the status bundle

        Returns:
            The per-device error message, or None on success

        Raises:
            DeviceNotFoundError: If the device is unknown after a refresh
        """
        state = await self.refresh_once()
        if state.bundle is None:
            raise DeviceNotFoundError(
                f"Status unavailable, cannot find device {device_id!r}: {state.error_message}"
            )

        device = state.bundle.shelly.device(device_id)
        if device is None:
            raise DeviceNotFoundError(f"No device with id {device_id!r}")
        if not device.allows_control:
            logger.warning("Device %s does not advertise control support", device_id)

        await self.engine.toggle_device(device)
        return self.engine.device_error(device_id)

    def close(self) -> None:
        """Detach the reporter from the store."""
        self._unsubscribe()
