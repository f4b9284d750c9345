"""RoomPi status client - polls a host status endpoint and controls Shelly switches."""

__version__ = "0.1.0"

from roompi.scheduling import PollSettings, SyncEngine
from roompi.settings import UserSettings
from roompi.state import DashboardState, StatusStore
from roompi.status import StatusAPI, StatusAPIError, StatusBundle

__all__ = [
    "DashboardState",
    "PollSettings",
    "StatusAPI",
    "StatusAPIError",
    "StatusBundle",
    "StatusStore",
    "SyncEngine",
    "UserSettings",
]
