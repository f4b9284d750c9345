"""Status synchronization engine.

Owns the refresh lifecycle for one status server:

- a self-pacing poll loop whose period is dictated by the server
  (``streamInterval``, clamped) and stopped through a CancellationToken
- single-flight refreshes: a loading-visible refresh requested while another
  one runs is dropped, a silent refresh waits for it and then runs
- per-device command dispatch with in-flight and error bookkeeping

All state lives in a StatusStore and is only touched from the event loop
that runs the engine. Blocking HTTP calls go to an executor and only their
results come back to the loop, so no locks are needed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import Executor
from functools import partial
from typing import Any, Final, TypeVar

from roompi.common.enums import ShellyCommand
from roompi.scheduling.cancellation import CancellationToken
from roompi.scheduling.models import PollSettings
from roompi.state.store import DashboardState, StatusStore
from roompi.status.api import StatusAPI
from roompi.status.errors import StatusAPIError
from roompi.status.models import ShellyDevice, StatusBundle
from roompi.utils.time import TimeUtils

logger: Final = logging.getLogger(__name__)

GENERIC_COMMAND_ERROR: Final = "The device did not accept the command."
GENERIC_ERROR: Final = "An unexpected error occurred."

T = TypeVar("T")


def describe_error(error: BaseException) -> str:
    """Turn any refresh or command failure into a user-facing message.

    Args:
        error: The exception raised by the transport or decoder

    Returns:
        Human-readable description
    """
    if isinstance(error, StatusAPIError):
        return error.description
    return str(error) or GENERIC_ERROR


class SyncEngine:
    """Keeps a StatusStore in sync with the status server.

    Typical use from an asyncio application::

        engine = SyncEngine(StatusAPI.from_settings(config))
        engine.store.subscribe(render)
        engine.start()
        ...
        await engine.toggle_device(device)
        ...
        await engine.shutdown()
    """

    def __init__(
        self,
        api: StatusAPI,
        settings: PollSettings | None = None,
        store: StatusStore | None = None,
        initial_bundle: StatusBundle | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            api: Transport client used for fetches and commands
            settings: Poll timing policy
            store: Store to publish into (a fresh one by default)
            initial_bundle: Bundle to show before the first fetch completes
            executor: Executor for blocking HTTP calls (loop default if None)
        """
        self.api = api
        self.settings = settings or PollSettings()
        self.store = store or StatusStore()
        self._executor = executor
        self._poll_task: asyncio.Task[None] | None = None
        self._token: CancellationToken | None = None

        if initial_bundle is not None:
            self.store.update(
                bundle=initial_bundle,
                last_update=initial_bundle.server_date or initial_bundle.generated_at,
            )

    # ---- lifecycle ----
    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None

    def start(self) -> None:
        """Start the auto-refresh loop; a no-op if it is already running.

        Must be called from within the event loop that owns the store.
        """
        if self._poll_task is not None:
            return

        token = CancellationToken()
        self._token = token
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_loop(token), name="roompi-poll"
        )
        logger.info("Auto-refresh started")

    def stop(self) -> None:
        """Cancel the auto-refresh loop; a no-op if it is not running.

        Device commands already in flight are left to finish.
        """
        if self._poll_task is None:
            return

        if self._token is not None:
            self._token.cancel()
        self._poll_task.cancel()
        self._poll_task = None
        self._token = None
        logger.info("Auto-refresh stopped")

    async def shutdown(self) -> None:
        """Stop polling and wait for the loop task to unwind."""
        task = self._poll_task
        self.stop()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                # Expected when cancelling the polling task during shutdown
                pass

    # ---- refresh ----
    async def manual_refresh(self) -> None:
        """Refresh once with the loading indicator, independent of the loop timer."""
        await self._refresh(update_loading_state=True)

    def next_delay(self) -> float:
        """Seconds to wait before the next scheduled poll."""
        bundle = self.store.bundle
        if bundle is not None:
            interval = float(bundle.stream_interval)
        else:
            interval = self.settings.fallback_interval
        return TimeUtils.clamp_seconds(
            interval, self.settings.min_interval, self.settings.max_interval
        )

    async def _poll_loop(self, token: CancellationToken) -> None:
        while not token.cancelled:
            await self._refresh(update_loading_state=True)

            if token.cancelled:
                break

            delay = self.next_delay()
            logger.debug("Next refresh in %.1f s", delay)
            if not await token.sleep(delay):
                break

        logger.debug("Poll loop finished")

    async def _refresh(self, update_loading_state: bool) -> None:
        if self.store.is_loading:
            if update_loading_state:
                logger.debug("Refresh already in progress; skipping")
                return

            logger.debug("Silent refresh waiting for the in-flight refresh")
            while self.store.is_loading:
                await asyncio.sleep(self.settings.wait_tick)

        if update_loading_state:
            self.store.update(is_loading=True, error_message=None)

        changes: dict[str, Any] = {}
        try:
            bundle = await self._run_blocking(
                self.api.fetch_status_bundle, self.settings.history_limit
            )
        except asyncio.CancelledError:
            logger.debug("Refresh cancelled")
            raise
        except Exception as exc:
            message = describe_error(exc)
            logger.warning("Status refresh failed: %s", message)
            if update_loading_state:
                changes["error_message"] = message
        else:
            changes["bundle"] = bundle
            changes["last_update"] = (
                bundle.server_date or bundle.generated_at or TimeUtils.now_localized()
            )
            if update_loading_state:
                changes["error_message"] = None
            logger.debug(
                "Status refreshed: %d service(s), %d device(s)",
                len(bundle.snapshot.services),
                len(bundle.shelly.devices),
            )
        finally:
            if update_loading_state:
                changes["is_loading"] = False
            if changes:
                self.store.update(**changes)

    # ---- device commands ----
    async def toggle_device(self, device: ShellyDevice) -> None:
        """Flip a Shelly device and refresh silently on success.

        Repeated calls for a device whose command is still in flight are
        ignored. Failures are recorded per device and never touch the
        top-level error message.

        Args:
            device: Device as found in the current bundle
        """
        device_id = device.id

        if self.store.state.is_operation_in_progress(device_id):
            logger.debug("Command for %s already in flight; ignoring", device_id)
            return

        self.store.begin_operation(device_id)
        try:
            command = ShellyCommand.TURN_OFF if device.is_on else ShellyCommand.TURN_ON
            logger.info("Sending %s to %s", command.value, device_id)
            response = await self._run_blocking(
                self.api.send_shelly_command,
                device_id,
                command,
                self.command_url(device, command),
            )

            if not response.is_successful:
                message = response.message or GENERIC_COMMAND_ERROR
                logger.warning("Device %s rejected %s: %s", device_id, command.value, message)
                self.store.set_device_error(device_id, message)
                return

            self.store.set_device_error(device_id, None)
            await self._refresh(update_loading_state=False)
        except asyncio.CancelledError:
            logger.debug("Command for %s cancelled", device_id)
            raise
        except Exception as exc:
            message = describe_error(exc)
            logger.warning("Command for %s failed: %s", device_id, message)
            self.store.set_device_error(device_id, message)
        finally:
            self.store.end_operation(device_id)

    @staticmethod
    def command_url(device: ShellyDevice, command: ShellyCommand) -> str | None:
        """Pick the server-supplied control URL for ``command``.

        Directional URLs win, ``toggle`` is the fallback. None means the
        transport's generic command endpoint is used.
        """
        control = device.control
        if control is None:
            return None

        if command is ShellyCommand.TURN_ON:
            return control.turn_on or control.toggle
        if command is ShellyCommand.TURN_OFF:
            return control.turn_off or control.toggle
        return control.toggle

    def is_operation_in_progress(self, device_id: str) -> bool:
        return self.store.state.is_operation_in_progress(device_id)

    def device_error(self, device_id: str) -> str | None:
        return self.store.state.device_error(device_id)

    @property
    def state(self) -> DashboardState:
        return self.store.state

    async def _run_blocking(self, func: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(func, *args))
