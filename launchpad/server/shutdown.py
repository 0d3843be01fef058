# launchpad/server/shutdown.py
"""
Graceful shutdown coordinator.

Flow:
1. A termination signal calls request_shutdown()
   (RUNNING -> DRAINING, listener stops accepting, deadline starts)
2. run() races the listener drain against the grace deadline
   a. drain wins  -> clean shutdown, exit code 0
   b. deadline wins -> listener aborted, exit code 1
3. State ends in TERMINATED
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from launchpad.core.constants import GRACE_PERIOD_SECONDS
from launchpad.core.errors import ListenerClosedError
from launchpad.core.models import ShutdownOutcome, ShutdownPath, ShutdownState
from launchpad.core.state_machine import ShutdownStateMachine
from launchpad.server.listener import Listener

logger = logging.getLogger(__name__)


class ShutdownCoordinator:
    """Owns the shutdown state machine for one listener."""

    def __init__(
        self,
        listener: Listener,
        *,
        grace_period: float = GRACE_PERIOD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._listener = listener
        self.grace_period = grace_period
        self._clock = clock

        self._machine = ShutdownStateMachine()
        self._stop_requested = asyncio.Event()

        self.signal_name: Optional[str] = None
        self.draining_since: Optional[float] = None
        self.outcome: Optional[ShutdownOutcome] = None

    @property
    def state(self) -> ShutdownState:
        return self._machine.state

    # -------------------------
    # TRIGGER
    # -------------------------

    def request_shutdown(self, signal_name: str = "shutdown request") -> bool:
        """
        Begin draining.

        Only the first call has any effect; repeats never restart the
        deadline or stop the listener twice.

        Returns:
            True if this call started the drain
        """
        if self._machine.state != ShutdownState.RUNNING:
            logger.info(
                f"Received {signal_name} while {self._machine.state.value}, "
                "shutdown already in progress"
            )
            return False

        logger.info(f"🛑 Received {signal_name}. Starting graceful shutdown...")

        self._machine.transition(ShutdownState.DRAINING)
        self.signal_name = signal_name
        self.draining_since = self._clock()

        try:
            self._listener.stop_accepting()
        finally:
            # The deadline runs even if the listener could not be stopped
            self._stop_requested.set()
        return True

    # -------------------------
    # RACE
    # -------------------------

    async def run(self) -> ShutdownOutcome:
        """
        Wait for a shutdown request, then drain within the grace period.

        Raises:
            ListenerClosedError: listener stopped before any shutdown request
        """
        closed = asyncio.ensure_future(self._listener.wait_closed())
        stop = asyncio.ensure_future(self._stop_requested.wait())

        done, _ = await asyncio.wait(
            {closed, stop},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if stop not in done:
            stop.cancel()
            # Re-raise whatever made the listener exit
            closed.result()
            raise ListenerClosedError(
                "Listener stopped before shutdown was requested"
            )

        return await self._drain(closed)

    async def _drain(self, closed: asyncio.Future) -> ShutdownOutcome:
        elapsed = self._clock() - self.draining_since
        remaining = max(0.0, self.grace_period - elapsed)

        done, _ = await asyncio.wait({closed}, timeout=remaining)

        if closed in done and not closed.cancelled() and closed.exception() is None:
            logger.info("✅ HTTP server closed. Internal cleanup complete.")
            path = ShutdownPath.CLEAN

        elif closed in done:
            error = "cancelled" if closed.cancelled() else closed.exception()
            logger.error(f"❌ Listener failed while draining: {error}")
            path = ShutdownPath.FORCED

        else:
            logger.error(
                "Could not close connections in time, forcefully shutting down"
            )
            # Do not await the aborted drain; exit time must stay bounded.
            self._listener.abort()
            closed.cancel()
            path = ShutdownPath.FORCED

        self._machine.transition(ShutdownState.TERMINATED)

        self.outcome = ShutdownOutcome(
            path=path,
            signal_name=self.signal_name,
            drain_seconds=self._clock() - self.draining_since,
        )
        return self.outcome

    def __repr__(self) -> str:
        return (
            f"<ShutdownCoordinator(state={self._machine.state.value}, "
            f"grace_period={self.grace_period}s)>"
        )
