"""User-configurable settings loaded from config.yaml."""

from __future__ import annotations

import os
import re
import urllib.parse
from pathlib import Path
from typing import ClassVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

# Load environment variables from .env file(s)
load_dotenv()


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


class BasicCredentials(BaseModel):
    """HTTP Basic credentials for the status server."""

    username: str
    password: str


class UserSettings(BaseModel):
    """Connection and polling settings for the status client.

    Values come from config.yaml; ``${VAR}`` placeholders are expanded from
    the environment (and any .env file) so passwords can stay out of the file.
    """

    # Default search paths for configuration
    DEFAULT_CONFIG_PATHS: ClassVar[list[Path]] = [
        Path("config.yaml"),
        Path("~/.config/roompi/config.yaml").expanduser(),
        Path("/etc/roompi/config.yaml"),
    ]

    # Server
    base_url: str = Field(..., description="Base URL of the status server")
    username: str | None = Field(None, description="HTTP Basic username")
    password: str | None = Field(None, description="HTTP Basic password")
    client_tag: str = Field("python", min_length=1, description="Value sent as ?status=<tag>")

    # Polling
    history_limit: int | None = Field(
        120, gt=0, description="History samples to request; null omits the limit"
    )
    fallback_interval: float = Field(
        5.0, gt=0, description="Seconds between polls before the server dictates one"
    )

    # Timeouts
    bundle_timeout: float = Field(15.0, gt=0, description="Status fetch timeout (seconds)")
    command_timeout: float = Field(10.0, gt=0, description="Device command timeout (seconds)")

    # ---- validators ----
    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urllib.parse.urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {v!r}")
        return v

    @model_validator(mode="after")
    def check_credentials_pair(self) -> UserSettings:
        if bool(self.username) != bool(self.password):
            raise ValueError("username and password must be set together")
        return self

    # ---- convenience methods ----
    @property
    def credentials(self) -> BasicCredentials | None:
        """Credentials to attach to every request, if configured."""
        if self.username and self.password:
            return BasicCredentials(username=self.username, password=self.password)
        return None

    @classmethod
    def load(cls, path: Path | None = None) -> UserSettings:
        """Load configuration from a YAML file.

        Args:
            path: Path to config file (optional, searches default locations if None)

        Returns:
            Validated UserSettings object

        Raises:
            FileNotFoundError: If no config file is found
            RuntimeError: If the config file cannot be parsed or is invalid
        """
        # Try to find config file
        if path is None:
            # Check environment variable first
            env_path = os.environ.get("ROOMPI_CONFIG")
            if env_path:
                path = Path(env_path)
                if not path.exists():
                    raise FileNotFoundError(f"Config file from ROOMPI_CONFIG not found: {path}")
            else:
                # Try default paths
                for default_path in cls.DEFAULT_CONFIG_PATHS:
                    if default_path.exists():
                        path = default_path
                        break
                else:
                    raise FileNotFoundError(
                        "No configuration file found. Create config.yaml or set ROOMPI_CONFIG."
                    )

        # Load and parse config
        import yaml  # local import to avoid hard dep for callers

        try:
            raw = _interpolate_env(path.read_text())
            data = yaml.safe_load(raw)
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Unable to read config YAML: {exc}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as err:
            raise RuntimeError(f"Invalid configuration:\n{err}") from err
