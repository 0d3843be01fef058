# launchpad/server/listener.py
"""HTTP listener handle owned by the shutdown coordinator."""

import asyncio
import contextlib
import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional

import uvicorn

from launchpad.core.errors import ListenerBindError, ListenerClosedError

logger = logging.getLogger(__name__)


class Listener(ABC):
    """Something that accepts connections and can be drained."""

    @abstractmethod
    def stop_accepting(self) -> None:
        """Refuse new connections; in-flight ones keep running."""
        pass

    @abstractmethod
    async def wait_closed(self) -> None:
        """Resolve once every accepted connection has finished."""
        pass

    @abstractmethod
    def abort(self) -> None:
        """Stop serving immediately without waiting for connections."""
        pass


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind a TCP socket for the listener.

    Raises:
        ListenerBindError: address in use or not permitted. Not retried.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise ListenerBindError(host, port, e.strerror or str(e)) from e

    return sock


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the shutdown coordinator."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class UvicornListener(Listener):
    """Serves an ASGI app on a pre-bound socket through uvicorn."""

    def __init__(self, app, sock: socket.socket, *, log_level: str = "info"):
        self.sock = sock
        self.host, self.port = sock.getsockname()[:2]

        config = uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            log_level=log_level,
            log_config=None,
            timeout_graceful_shutdown=None,
        )
        self._server = _Server(config)
        self._task: Optional[asyncio.Task] = None

    @property
    def accepting(self) -> bool:
        return (
            self._server.started
            and not self._server.should_exit
            and any(s.is_serving() for s in self._server.servers)
        )

    async def start(self) -> None:
        """Start serving and return once the socket is accepting."""
        self._task = asyncio.ensure_future(self._server.serve(sockets=[self.sock]))

        while not self._server.started:
            if self._task.done():
                self._task.result()
                raise ListenerClosedError("Listener exited during startup")
            await asyncio.sleep(0.01)

        if self._server.should_exit:
            # Stopped during startup: uvicorn returns without closing its servers
            self._close_servers()
            logger.info(f"🛑 Shutdown requested during startup, port {self.port} closed")
            return

        logger.info(f"🚀 Server is running on port {self.port}")
        logger.info(f"🔗 Local access: http://localhost:{self.port}")

    def stop_accepting(self) -> None:
        self._server.should_exit = True
        self._close_servers()

    def _close_servers(self) -> None:
        # Not created until uvicorn finishes startup
        for server in getattr(self._server, "servers", []):
            server.close()

    async def wait_closed(self) -> None:
        if self._task is None:
            return
        await self._task

    def abort(self) -> None:
        self._server.force_exit = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def __repr__(self) -> str:
        return f"<UvicornListener(host={self.host}, port={self.port})>"
