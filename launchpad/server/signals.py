# launchpad/server/signals.py
"""Route termination signals to the shutdown coordinator."""

import asyncio
import signal

# SIGTERM: orchestrator stop (ECS task shutdown). SIGINT: Ctrl+C.
HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    coordinator,
    signals=HANDLED_SIGNALS,
) -> None:
    for sig in signals:
        loop.add_signal_handler(sig, coordinator.request_shutdown, sig.name)


def remove_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    signals=HANDLED_SIGNALS,
) -> None:
    for sig in signals:
        loop.remove_signal_handler(sig)
