"""HTTP client for the RoomPi status endpoint."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Final

import requests
from pydantic import ValidationError
from requests.auth import HTTPBasicAuth

from roompi.common.enums import ShellyCommand
from roompi.settings import BasicCredentials, UserSettings

from .errors import (
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    ParseError,
)
from .models import ShellyCommandResponse, StatusBundle

logger: Final = logging.getLogger(__name__)

BUNDLE_ENDPOINT: Final = "index.php"
SHELLY_ENDPOINT: Final = "shelly.php"
DEFAULT_HISTORY_LIMIT: Final = 120

# Always revalidate against the network; intermediaries must not serve stale status
REQUEST_HEADERS: Final = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class StatusAPI:
    """Client for the status bundle and Shelly command endpoints.

    Both calls are plain blocking ``requests`` GETs; the sync engine runs
    them in an executor. Every failure is mapped onto the StatusAPIError
    hierarchy so callers only need one except clause.
    """

    def __init__(
        self,
        base_url: str,
        credentials: BasicCredentials | None = None,
        client_tag: str = "python",
        bundle_timeout: float = 15.0,
        command_timeout: float = 10.0,
    ) -> None:
        """Initialize the status API client.

        Args:
            base_url: Server root, or a URL already pointing at a ``.php`` script
            credentials: Optional HTTP Basic credentials
            client_tag: Value sent as the ``status`` query parameter
            bundle_timeout: Timeout for bundle requests in seconds
            command_timeout: Timeout for device commands in seconds
        """
        self.base_url = base_url
        self.credentials = credentials
        self.client_tag = client_tag
        self.bundle_timeout = bundle_timeout
        self.command_timeout = command_timeout

    @classmethod
    def from_settings(cls, config: UserSettings) -> StatusAPI:
        """Build a client from user settings."""
        return cls(
            config.base_url,
            credentials=config.credentials,
            client_tag=config.client_tag,
            bundle_timeout=config.bundle_timeout,
            command_timeout=config.command_timeout,
        )

    def fetch_status_bundle(self, history_limit: int | None = DEFAULT_HISTORY_LIMIT) -> StatusBundle:
        """Retrieve and decode the current status bundle.

        Args:
            history_limit: Number of history samples to request, None for the
                server default

        Returns:
            Validated StatusBundle

        Raises:
            InvalidURLError: When no URL can be built from the base URL
            InvalidResponseError: When the server reply is not usable HTTP
            HTTPStatusError: For non-2xx responses
            NetworkError: When network connectivity issues occur
            ParseError: When required payload fields are missing or malformed
        """
        url = self.bundle_url()
        params: dict[str, str] = {"status": self.client_tag}
        if history_limit is not None:
            params["limit"] = str(history_limit)

        resp = self._get(url, params, self.bundle_timeout)

        try:
            return StatusBundle.model_validate_json(resp.content)
        except ValidationError as exc:
            logger.error("Status payload rejected: %d error(s)", exc.error_count())
            raise ParseError(_summarize_validation_error(exc), exc) from exc

    def send_shelly_command(
        self,
        device_id: str,
        command: ShellyCommand,
        override_url: str | None = None,
    ) -> ShellyCommandResponse:
        """Send a switch command to a Shelly device.

        Args:
            device_id: Device identifier from the status bundle
            command: Command to send
            override_url: Absolute control URL supplied by the server; preferred
                over the generic endpoint when present

        Returns:
            The device acknowledgement. Empty or unrecognised bodies are
            treated as success.

        Raises:
            InvalidURLError, InvalidResponseError, HTTPStatusError, NetworkError
        """
        if override_url:
            url, params = override_url, None
        else:
            url = self.shelly_url()
            params = {"device": device_id, "command": command.value}

        resp = self._get(url, params, self.command_timeout)

        if not resp.content:
            return ShellyCommandResponse.success_placeholder()

        try:
            return ShellyCommandResponse.model_validate_json(resp.content)
        except ValidationError:
            # Not our schema; keep the raw text for the user
            logger.debug("Non-JSON acknowledgement from %s: %r", device_id, resp.text[:200])
            return ShellyCommandResponse(success=True, message=resp.text)

    def bundle_url(self) -> str:
        """URL of the status script (``index.php`` unless the base already names a script)."""
        parts = self._split_base()
        path = parts.path
        if not path.lower().endswith(".php"):
            path = _join_path(path, BUNDLE_ENDPOINT)
        return urllib.parse.urlunsplit(parts._replace(path=path, query="", fragment=""))

    def shelly_url(self) -> str:
        """URL of the generic Shelly command script, a sibling of the status script."""
        parts = self._split_base()
        path = parts.path
        if path.lower().endswith(".php"):
            path = path.rsplit("/", 1)[0]
        path = _join_path(path, SHELLY_ENDPOINT)
        return urllib.parse.urlunsplit(parts._replace(path=path, query="", fragment=""))

    # Private helper methods
    def _split_base(self) -> urllib.parse.SplitResult:
        try:
            parts = urllib.parse.urlsplit(self.base_url)
        except ValueError as exc:
            raise InvalidURLError(self.base_url) from exc
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidURLError(self.base_url)
        return parts

    def _get(
        self, url: str, params: dict[str, str] | None, timeout: float
    ) -> requests.Response:
        auth = None
        if self.credentials is not None:
            auth = HTTPBasicAuth(self.credentials.username, self.credentials.password)

        try:
            resp = requests.get(
                url,
                params=params,
                headers=REQUEST_HEADERS,
                auth=auth,
                timeout=timeout,
            )
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidSchema,
            requests.exceptions.MissingSchema,
        ) as exc:
            raise InvalidURLError(url) from exc
        except (
            requests.exceptions.ContentDecodingError,
            requests.exceptions.ChunkedEncodingError,
            requests.exceptions.InvalidHeader,
        ) as exc:
            logger.warning("Malformed HTTP response from %s: %s", url, exc)
            raise InvalidResponseError(exc) from exc
        except requests.RequestException as exc:
            logger.warning("Status API network error: %s", exc)
            raise NetworkError(str(exc), exc) from exc

        if not 200 <= resp.status_code <= 299:
            err = HTTPStatusError.from_status(resp.status_code, resp.text)
            logger.error("Status API error: %s - %s", resp.status_code, err.message)
            raise err

        return resp


def _join_path(base: str, leaf: str) -> str:
    return f"{base.rstrip('/')}/{leaf}"


def _summarize_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
