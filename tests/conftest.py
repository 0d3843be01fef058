#tests\conftest.py

"""Pytest configuration and fixtures."""

import asyncio
import socket

import pytest

from launchpad.server.listener import Listener
from launchpad.topology import StackConfig, build_topology


class FakeListener(Listener):
    """Listener whose drain takes a fixed time after stop_accepting()."""

    def __init__(
        self,
        drain_seconds: float = 0.0,
        fail_with: Exception = None,
        stop_error: Exception = None,
    ):
        self.drain_seconds = drain_seconds
        self.fail_with = fail_with
        self.stop_error = stop_error

        self.accepting = True
        self.stop_calls = 0
        self.aborted = False
        self._closed = None

    def _closed_event(self) -> asyncio.Event:
        if self._closed is None:
            self._closed = asyncio.Event()
        return self._closed

    def stop_accepting(self) -> None:
        self.stop_calls += 1
        if self.stop_error is not None:
            raise self.stop_error
        self.accepting = False
        asyncio.get_running_loop().call_later(
            self.drain_seconds, self._closed_event().set
        )

    async def wait_closed(self) -> None:
        await self._closed_event().wait()
        if self.fail_with is not None:
            raise self.fail_with

    def abort(self) -> None:
        self.aborted = True

    def close_unexpectedly(self) -> None:
        self._closed_event().set()


@pytest.fixture
def fake_listener_factory():
    """Build fake listeners with a given drain time."""
    return FakeListener


@pytest.fixture
def free_port():
    """A TCP port nothing is listening on right now."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def no_port_env(monkeypatch):
    """Make sure PORT and LOG_LEVEL come from defaults."""
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def stack_config():
    return StackConfig()


@pytest.fixture
def topology(stack_config):
    """Default deployment topology."""
    return build_topology(stack_config)
