"""Unit tests for renderer selection in buildcache.utils.logging."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest
import structlog

from buildcache.utils.logging import configure_logging, use_json_output


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture
def _restore_logging() -> Iterator[None]:
    yield
    configure_logging()


class TestUseJsonOutput:
    @pytest.mark.parametrize(("log_format", "expected"), [("json", True), ("console", False)])
    def test_explicit_format_wins(self, log_format: str, expected: bool) -> None:
        assert use_json_output(log_format, app_env="production", stream=_Terminal()) is expected
        assert use_json_output(log_format, app_env="development", stream=io.StringIO()) is expected

    def test_auto_on_terminal_is_console(self) -> None:
        assert use_json_output("auto", app_env="development", stream=_Terminal()) is False

    def test_auto_off_terminal_is_json(self) -> None:
        assert use_json_output("auto", app_env="development", stream=io.StringIO()) is True

    def test_auto_in_production_is_json(self) -> None:
        assert use_json_output("auto", app_env="production", stream=_Terminal()) is True

    def test_app_env_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "production")
        assert use_json_output("auto", stream=_Terminal()) is True

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(ValueError, match="log_format"):
            use_json_output("xml")


@pytest.mark.usefixtures("_restore_logging")
class TestConfigureLogging:
    def test_json_renderer_when_forced(self) -> None:
        configure_logging(json_output=True)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_console_renderer_when_forced(self) -> None:
        configure_logging(json_output=False)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_stdlib_root_logger_follows_level(self) -> None:
        configure_logging("WARNING", json_output=True)
        assert logging.getLogger().level == logging.WARNING
