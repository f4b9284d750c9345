"""Application settings management.

This package provides:
- UserSettings: User-configurable settings loaded from config.yaml
- BasicCredentials: Optional HTTP Basic credentials derived from them
"""

from roompi.settings.user import BasicCredentials, UserSettings

__all__ = ["BasicCredentials", "UserSettings"]
