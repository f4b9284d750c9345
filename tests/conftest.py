import asyncio
import copy
import json
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from roompi.common.enums import ShellyCommand
from roompi.status.models import ShellyCommandResponse, StatusBundle

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    return json.loads((DATA_DIR / "status_sample.json").read_text(encoding="utf-8"))


@pytest.fixture
def status_bundle(sample_payload: dict[str, Any]) -> StatusBundle:
    return StatusBundle.model_validate(sample_payload)


@pytest.fixture
def payload_factory(sample_payload: dict[str, Any]) -> Callable[..., dict[str, Any]]:
    """Return deep copies of the sample payload with top-level overrides."""

    def make(**overrides: Any) -> dict[str, Any]:
        payload = copy.deepcopy(sample_payload)
        payload.update(overrides)
        return payload

    return make


class FakeStatusAPI:
    """Stand-in for StatusAPI whose calls can be held open with gates.

    Calls run in executor threads, so gates are threading.Events.
    """

    def __init__(self, *bundles: StatusBundle) -> None:
        self.bundles = list(bundles)
        self.command_response = ShellyCommandResponse(success=True)
        self.fetch_calls = 0
        self.command_calls: list[tuple[str, ShellyCommand, str | None]] = []
        self.fetch_gate: threading.Event | None = None
        self.command_gate: threading.Event | None = None
        self.fetch_error: Exception | None = None
        self.command_error: Exception | None = None

    def fetch_status_bundle(self, history_limit: int | None = 120) -> StatusBundle:
        self.fetch_calls += 1
        result = self.bundles.pop(0) if len(self.bundles) > 1 else self.bundles[0]
        if self.fetch_gate is not None:
            self.fetch_gate.wait(timeout=5)
        if self.fetch_error is not None:
            raise self.fetch_error
        return result

    def send_shelly_command(
        self, device_id: str, command: ShellyCommand, override_url: str | None = None
    ) -> ShellyCommandResponse:
        self.command_calls.append((device_id, command, override_url))
        if self.command_gate is not None:
            self.command_gate.wait(timeout=5)
        if self.command_error is not None:
            raise self.command_error
        return self.command_response


@pytest.fixture
def fake_api(status_bundle: StatusBundle) -> FakeStatusAPI:
    return FakeStatusAPI(status_bundle)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)
