"""Status package - holds the API client, payload models, and custom errors."""

from .api import StatusAPI
from .errors import (
    AuthenticationError,
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NotFoundError,
    ParseError,
    ServerError,
    StatusAPIError,
)
from .models import (
    HistoryEntry,
    HistoryMetric,
    HistoryPayload,
    ServiceStatus,
    ShellyCommandResponse,
    ShellyControl,
    ShellyDevice,
    ShellyPayload,
    StatusBundle,
    StatusSnapshot,
)

# Define what gets imported with: from roompi.status import *
__all__ = [
    "AuthenticationError",
    "HTTPStatusError",
    "HistoryEntry",
    "HistoryMetric",
    "HistoryPayload",
    "InvalidResponseError",
    "InvalidURLError",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "ServerError",
    "ServiceStatus",
    "ShellyCommandResponse",
    "ShellyControl",
    "ShellyDevice",
    "ShellyPayload",
    "StatusAPI",
    "StatusAPIError",
    "StatusBundle",
    "StatusSnapshot",
]
