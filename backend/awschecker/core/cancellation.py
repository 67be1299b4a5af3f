"""Process-wide stop condition shared by every runner."""

import asyncio
from typing import Optional


class CancellationSignal:
    """One-shot, broadcast stop flag.

    Firing is idempotent: once fired the signal stays fired, and firing
    again has no further effect. Waiters are woken as soon as it fires.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def fired(self) -> bool:
        """Whether the signal has fired."""
        return self._event.is_set()

    def fire(self) -> None:
        """Fire the signal. Safe to call any number of times."""
        self._event.set()

    async def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait until the signal fires or ``timeout`` seconds elapse.

        Args:
            timeout: Maximum seconds to wait; ``None`` waits indefinitely.

        Returns:
            True if the signal fired, False if the timeout elapsed first.
        """
        if self._event.is_set():
            return True
        if timeout is None:
            await self._event.wait()
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=max(timeout, 0))
        except asyncio.TimeoutError:
            return self._event.is_set()
        return True
