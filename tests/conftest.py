"""Pytest configuration and fixtures for docker-wine tests.

This module ensures the docker_wine package is importable during tests
without requiring installation.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from docker_wine.bridge import DisplayStatus, HostBridge  # noqa: E402
from docker_wine.launch_config import CurrentUser  # noqa: E402
from docker_wine.options import ParseContext  # noqa: E402

ALICE = CurrentUser(name="alice", uid=1000, gid=1000)


@pytest.fixture
def alice() -> CurrentUser:
    return ALICE


@pytest.fixture
def ctx() -> ParseContext:
    """Parse context with a fixed host user and no terminal."""
    return ParseContext(capture_user=lambda: ALICE, read_password=lambda: "secret")


@pytest.fixture
def bridge() -> MagicMock:
    """Host bridge that reports a ready display and no audio."""
    mock = MagicMock(spec=HostBridge)
    mock.ensure_display_reachable.return_value = DisplayStatus.READY
    mock.ensure_audio_socket.return_value = None
    return mock


@pytest.fixture
def xauth_env(tmp_path: Path) -> dict[str, str]:
    """Environment pointing XAUTHORITY at an existing file."""
    xauth = tmp_path / ".Xauthority"
    xauth.write_text("cookie")
    return {"XAUTHORITY": str(xauth), "HOME": str(tmp_path)}
