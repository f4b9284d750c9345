"""Observable dashboard state."""

from roompi.state.protocols import RecordingObserver, StateObserver
from roompi.state.store import DashboardState, StatusStore

__all__ = ["DashboardState", "RecordingObserver", "StateObserver", "StatusStore"]
