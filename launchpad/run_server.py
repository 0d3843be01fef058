# launchpad/run_server.py
"""Run the web service until a termination signal drains it."""

import asyncio
import logging
import sys

from launchpad.core.constants import BIND_HOST, GRACE_PERIOD_SECONDS
from launchpad.core.errors import LaunchpadError, ListenerBindError
from launchpad.core.models import ShutdownOutcome
from launchpad.server.app import app
from launchpad.server.config import ServiceSettings, get_settings
from launchpad.server.listener import UvicornListener, bind_socket
from launchpad.server.shutdown import ShutdownCoordinator
from launchpad.server.signals import install_signal_handlers, remove_signal_handlers

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


async def serve(
    settings: ServiceSettings,
    *,
    host: str = BIND_HOST,
    grace_period: float = GRACE_PERIOD_SECONDS,
    asgi_app=app,
) -> ShutdownOutcome:
    """
    Bind, serve, and block until shutdown completes.

    Raises:
        ListenerBindError: the port could not be bound
    """
    sock = bind_socket(host, settings.port)
    loop = asyncio.get_running_loop()

    try:
        listener = UvicornListener(asgi_app, sock, log_level=settings.log_level.lower())
        coordinator = ShutdownCoordinator(listener, grace_period=grace_period)
        install_signal_handlers(loop, coordinator)

        await listener.start()
        return await coordinator.run()
    except Exception:
        # Harmless if uvicorn already closed it
        sock.close()
        raise
    finally:
        remove_signal_handlers(loop)


def main():
    """Main entry point."""
    # Configured before settings load so their fallback warnings are formatted
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    try:
        outcome = asyncio.run(serve(settings))
    except ListenerBindError as e:
        logger.critical(f"❌ Fatal startup error: {e}")
        sys.exit(1)
    except LaunchpadError as e:
        logger.critical(f"❌ Server stopped unexpectedly: {e}")
        sys.exit(1)

    sys.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
