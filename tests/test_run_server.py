#tests\test_run_server.py

"""Test the server entry point exit codes."""

import asyncio
import logging

import pytest

from launchpad import run_server
from launchpad.core.errors import ListenerBindError, ListenerClosedError
from launchpad.core.models import ShutdownOutcome, ShutdownPath
from launchpad.server.config import ServiceSettings
from launchpad.server.listener import UvicornListener


def _patch_serve(monkeypatch, result=None, error=None):
    async def fake_serve(settings, **kwargs):
        if error is not None:
            raise error
        return result

    monkeypatch.setattr(run_server, "serve", fake_serve)


@pytest.fixture(autouse=True)
def restore_root_level():
    """main() sets the root logger level; put it back."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


class TestMain:

    @pytest.mark.parametrize("path,code", [
        (ShutdownPath.CLEAN, 0),
        (ShutdownPath.FORCED, 1),
    ])
    def test_exit_code_follows_outcome(self, monkeypatch, no_port_env, path, code):
        _patch_serve(monkeypatch, result=ShutdownOutcome(path, "SIGTERM", 0.1))

        with pytest.raises(SystemExit) as exc_info:
            run_server.main()

        assert exc_info.value.code == code

    def test_bind_failure_exits_1(self, monkeypatch, no_port_env):
        _patch_serve(monkeypatch, error=ListenerBindError("0.0.0.0", 3000, "Address already in use"))

        with pytest.raises(SystemExit) as exc_info:
            run_server.main()

        assert exc_info.value.code == 1

    def test_unexpected_listener_exit_exits_1(self, monkeypatch, no_port_env):
        _patch_serve(monkeypatch, error=ListenerClosedError("gone"))

        with pytest.raises(SystemExit) as exc_info:
            run_server.main()

        assert exc_info.value.code == 1

    def test_logging_configured_before_settings(self, monkeypatch, no_port_env):
        """Test settings fallback warnings go through the configured format."""
        calls = []
        real_get_settings = run_server.get_settings

        def record_basic_config(**kwargs):
            calls.append(("basicConfig", kwargs.get("format")))

        def record_get_settings():
            calls.append(("get_settings", None))
            return real_get_settings()

        monkeypatch.setattr(run_server.logging, "basicConfig", record_basic_config)
        monkeypatch.setattr(run_server, "get_settings", record_get_settings)
        _patch_serve(monkeypatch, result=ShutdownOutcome(ShutdownPath.CLEAN, "SIGTERM", 0.1))

        with pytest.raises(SystemExit):
            run_server.main()

        assert calls == [
            ("basicConfig", run_server.LOG_FORMAT),
            ("get_settings", None),
        ]

    def test_invalid_port_warning_is_logged(self, monkeypatch, no_port_env, caplog):
        monkeypatch.setenv("PORT", "not-a-port")
        seen = {}

        async def fake_serve(settings, **kwargs):
            seen["port"] = settings.port
            return ShutdownOutcome(ShutdownPath.CLEAN, "SIGTERM", 0.1)

        monkeypatch.setattr(run_server, "serve", fake_serve)

        with caplog.at_level(logging.WARNING, logger="launchpad"):
            with pytest.raises(SystemExit):
                run_server.main()

        assert seen["port"] == 3000
        assert any("PORT" in r.getMessage() for r in caplog.records)

    def test_log_level_applied_to_root_logger(self, monkeypatch, no_port_env):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        _patch_serve(monkeypatch, result=ShutdownOutcome(ShutdownPath.CLEAN, "SIGTERM", 0.1))

        with pytest.raises(SystemExit):
            run_server.main()

        assert logging.getLogger().level == logging.WARNING


class TestServe:

    def test_socket_closed_when_listener_fails_to_start(self, monkeypatch, free_port):
        bound = []
        real_bind_socket = run_server.bind_socket

        def record_bind_socket(host, port):
            sock = real_bind_socket(host, port)
            bound.append(sock)
            return sock

        async def failing_start(self):
            raise ListenerClosedError("Listener exited during startup")

        monkeypatch.setattr(run_server, "bind_socket", record_bind_socket)
        monkeypatch.setattr(UvicornListener, "start", failing_start)
        settings = ServiceSettings(_env_file=None, port=free_port)

        with pytest.raises(ListenerClosedError):
            asyncio.run(run_server.serve(settings, host="127.0.0.1"))

        assert len(bound) == 1
        assert bound[0].fileno() == -1
