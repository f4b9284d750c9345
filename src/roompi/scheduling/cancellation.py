"""Cooperative cancellation for the poll loop."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """One-shot flag checked by the poll loop at every suspension point.

    ``sleep`` doubles as the loop's timed wait: it returns early as soon as
    the token is cancelled, so stopping the engine never has to wait out a
    full poll interval.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def sleep(self, seconds: float) -> bool:
        """Wait for ``seconds`` or until cancelled.

        Returns:
            True if the full delay elapsed, False if the token was cancelled
        """
        if self.cancelled:
            return False
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return True
        return False
