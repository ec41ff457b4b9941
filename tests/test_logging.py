"""Tests for docker_wine.logging module."""

from __future__ import annotations

import logging

import pytest

from docker_wine.logging import (
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure,
    debug_requested,
    get_logger,
)


@pytest.fixture(autouse=True)
def reset_level():
    """Restore the package logger level after each test."""
    yield
    configure(debug=False)


class TestDebugRequested:
    def test_unset(self) -> None:
        assert debug_requested({}) is False

    @pytest.mark.parametrize("value", ["1", "true", "yes", "TRUE", " Yes "])
    def test_enabled(self, value: str) -> None:
        assert debug_requested({"DOCKER_WINE_DEBUG": value}) is True

    @pytest.mark.parametrize("value", ["0", "no", "invalid", ""])
    def test_disabled(self, value: str) -> None:
        assert debug_requested({"DOCKER_WINE_DEBUG": value}) is False


class TestGetLogger:
    def test_returns_logger(self) -> None:
        assert isinstance(get_logger("test_module"), logging.Logger)

    def test_prefixes_namespace(self) -> None:
        assert get_logger("my_module").name == "docker_wine.my_module"

    def test_keeps_package_names(self) -> None:
        assert get_logger("docker_wine.engine").name == "docker_wine.engine"
        assert get_logger("docker_wine").name == "docker_wine"

    def test_does_not_match_similar_prefix(self) -> None:
        assert get_logger("docker_winery").name == "docker_wine.docker_winery"


class TestConfigure:
    def test_warning_by_default(self) -> None:
        root = configure(debug=False)
        assert root.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in root.handlers)

    def test_debug(self) -> None:
        root = configure(debug=True)
        assert root.level == logging.DEBUG
        assert root.handlers[0].formatter._fmt == LOG_FORMAT_DEBUG

    def test_single_handler(self) -> None:
        configure(debug=False)
        configure(debug=False)
        assert len(logging.getLogger("docker_wine").handlers) == 1

    def test_reconfigure_toggles(self) -> None:
        configure(debug=True)
        assert logging.getLogger("docker_wine").level == logging.DEBUG
        configure(debug=False)
        root = logging.getLogger("docker_wine")
        assert root.level == logging.WARNING
        assert root.handlers[0].formatter._fmt == LOG_FORMAT

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCKER_WINE_DEBUG", "1")
        assert configure().level == logging.DEBUG
        monkeypatch.delenv("DOCKER_WINE_DEBUG")
        assert configure().level == logging.WARNING
