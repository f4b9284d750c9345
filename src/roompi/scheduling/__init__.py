"""Polling and device-command synchronization for the status dashboard."""

from roompi.scheduling.cancellation import CancellationToken
from roompi.scheduling.engine import SyncEngine, describe_error
from roompi.scheduling.models import PollSettings

__all__ = ["CancellationToken", "PollSettings", "SyncEngine", "describe_error"]
