# src/roompi/state/protocols.py
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from roompi.state.store import DashboardState


@runtime_checkable
class StateObserver(Protocol):
    """Protocol for anything that reacts to dashboard state changes.

    The store calls observers synchronously on the engine's event loop after
    every change, so implementations must not block.
    """

    def __call__(self, state: DashboardState) -> None:
        """Receive the new state snapshot.

        Args:
            state: Immutable DashboardState after the change
        """
        ...


class RecordingObserver:
    """Observer that keeps every state it receives, for testing."""

    def __init__(self) -> None:
        self.states: list[DashboardState] = []

    def __call__(self, state: DashboardState) -> None:
        self.states.append(state)

    @property
    def loading_transitions(self) -> list[bool]:
        """Successive distinct values of ``is_loading`` seen so far."""
        transitions: list[bool] = []
        for state in self.states:
            if not transitions or transitions[-1] != state.is_loading:
                transitions.append(state.is_loading)
        return transitions

    def reset_call_history(self) -> None:
        """Reset the recorded states for testing."""
        self.states = []


def create_recording_observer() -> RecordingObserver:
    """Create and return a recording observer for testing."""
    return RecordingObserver()
