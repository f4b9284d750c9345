"""Observable state published by the sync engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Final

from roompi.state.protocols import StateObserver
from roompi.status.models import StatusBundle

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """Immutable snapshot of everything a dashboard view needs.

    Attributes:
        bundle: Latest successfully decoded status bundle
        is_loading: A loading-visible refresh is in flight
        error_message: Top-level error from the last visible refresh
        last_update: Server time of the current bundle (or fetch time)
        operations: Ids of devices with a command in flight
        control_errors: Last command error per device id
    """

    bundle: StatusBundle | None = None
    is_loading: bool = False
    error_message: str | None = None
    last_update: datetime | None = None
    operations: frozenset[str] = frozenset()
    control_errors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def is_operation_in_progress(self, device_id: str) -> bool:
        return device_id in self.operations

    def device_error(self, device_id: str) -> str | None:
        return self.control_errors.get(device_id)


class StatusStore:
    """Holds the current DashboardState and broadcasts every change.

    All mutation is expected to happen on the engine's event loop. Each
    change swaps in a new frozen state object, so observers may keep the
    snapshot they were handed without it changing underneath them.
    """

    def __init__(self, initial: DashboardState | None = None) -> None:
        self._state = initial or DashboardState()
        self._observers: list[StateObserver] = []

    @property
    def state(self) -> DashboardState:
        return self._state

    # Convenience read accessors mirroring DashboardState
    @property
    def bundle(self) -> StatusBundle | None:
        return self._state.bundle

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def last_update(self) -> datetime | None:
        return self._state.last_update

    @property
    def operations(self) -> frozenset[str]:
        return self._state.operations

    @property
    def control_errors(self) -> Mapping[str, str]:
        return self._state.control_errors

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer.

        Args:
            observer: Callable receiving the new DashboardState after each change

        Returns:
            Function that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def update(self, **changes: Any) -> DashboardState:
        """Replace the state with a copy carrying ``changes`` and notify observers."""
        new_state = replace(self._state, **changes)
        self._state = new_state
        self._notify()
        return new_state

    # ---- per-device bookkeeping ----
    def begin_operation(self, device_id: str) -> None:
        errors = {k: v for k, v in self._state.control_errors.items() if k != device_id}
        self.update(
            operations=self._state.operations | {device_id},
            control_errors=MappingProxyType(errors),
        )

    def end_operation(self, device_id: str) -> None:
        self.update(operations=self._state.operations - {device_id})

    def set_device_error(self, device_id: str, message: str | None) -> None:
        errors = dict(self._state.control_errors)
        if message is None:
            errors.pop(device_id, None)
        else:
            errors[device_id] = message
        self.update(control_errors=MappingProxyType(errors))

    def _notify(self) -> None:
        state = self._state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                logger.exception("State observer %r failed", observer)
