"""Tests for docker_wine.bridge module.

All host commands are mocked; nothing here touches XQuartz or PulseAudio.
"""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from docker_wine.bridge import DisplayStatus, HostBridge, HostPlatform, detect_platform
from docker_wine.errors import (
    DisplayServerInstallError,
    ExternalToolError,
    InstallDeclined,
    UnsupportedPlatformError,
)


def completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestDetectPlatform:
    @pytest.mark.parametrize(
        ("system", "expected"),
        [
            ("Darwin", HostPlatform.MACOS),
            ("Linux", HostPlatform.LINUX),
            ("Windows", HostPlatform.UNSUPPORTED),
            ("FreeBSD", HostPlatform.UNSUPPORTED),
        ],
    )
    def test_mapping(self, system: str, expected: HostPlatform) -> None:
        assert detect_platform(system) is expected

    def test_reads_platform(self) -> None:
        with patch("docker_wine.bridge.platform.system", return_value="Linux"):
            assert detect_platform() is HostPlatform.LINUX


class TestDisplay:
    """ensure_display_reachable per host."""

    def test_linux_ready(self) -> None:
        with patch("docker_wine.bridge.subprocess.run") as mock_run:
            assert HostBridge().ensure_display_reachable(HostPlatform.LINUX) is DisplayStatus.READY
            mock_run.assert_not_called()

    def test_unsupported(self) -> None:
        with (
            patch("docker_wine.bridge.platform.system", return_value="Linux"),
            pytest.raises(UnsupportedPlatformError, match="got 'unsupported'"),
        ):
            HostBridge().ensure_display_reachable(HostPlatform.UNSUPPORTED)

    def test_macos_ready(self) -> None:
        """XQuartz installed and listening: whitelist loopback with xhost."""
        with (
            patch("docker_wine.bridge.Path.exists", return_value=True),
            patch("docker_wine.bridge.shutil.which", return_value="/opt/X11/bin/xhost"),
            patch("docker_wine.bridge.subprocess.run") as mock_run,
        ):
            mock_run.side_effect = [completed(stdout="0\n"), completed()]
            status = HostBridge().ensure_display_reachable(HostPlatform.MACOS)
        assert status is DisplayStatus.READY
        assert mock_run.call_args_list[1].args[0] == ["/opt/X11/bin/xhost", "+", "127.0.0.1"]

    def test_macos_enables_tcp(self) -> None:
        """nolisten_tcp not 0: write the default and ask for a reboot."""
        with (
            patch("docker_wine.bridge.Path.exists", return_value=True),
            patch("docker_wine.bridge.subprocess.run") as mock_run,
        ):
            mock_run.side_effect = [completed(stdout="1\n"), completed()]
            status = HostBridge().ensure_display_reachable(HostPlatform.MACOS)
        assert status is DisplayStatus.NEEDS_REBOOT
        write_cmd = mock_run.call_args_list[1].args[0]
        assert write_cmd[:2] == ["defaults", "write"]
        assert write_cmd[-2:] == ["-int", "0"]

    def test_macos_xhost_failure(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=True),
            patch("docker_wine.bridge.shutil.which", return_value="xhost"),
            patch("docker_wine.bridge.subprocess.run") as mock_run,
        ):
            mock_run.side_effect = [completed(stdout="0"), completed(1, stderr="no display")]
            with pytest.raises(ExternalToolError):
                HostBridge().ensure_display_reachable(HostPlatform.MACOS)

    def test_macos_installs_xquartz(self) -> None:
        confirm = MagicMock()
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="/opt/homebrew/bin/brew"),
            patch("docker_wine.bridge.subprocess.run") as mock_run,
        ):
            mock_run.side_effect = [completed(), completed()]
            status = HostBridge(confirm).ensure_display_reachable(HostPlatform.MACOS)
        assert status is DisplayStatus.NEEDS_REBOOT
        confirm.assert_called_once()
        assert mock_run.call_args_list[0].args[0] == [
            "/opt/homebrew/bin/brew",
            "install",
            "--cask",
            "xquartz",
        ]

    def test_macos_install_declined(self) -> None:
        confirm = MagicMock(side_effect=InstallDeclined("no"))
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="/usr/local/bin/brew"),
            patch("docker_wine.bridge.subprocess.run") as mock_run,
        ):
            with pytest.raises(InstallDeclined):
                HostBridge(confirm).ensure_display_reachable(HostPlatform.MACOS)
            mock_run.assert_not_called()

    def test_macos_no_brew(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value=None),
        ):
            with pytest.raises(DisplayServerInstallError):
                HostBridge(MagicMock()).ensure_display_reachable(HostPlatform.MACOS)

    def test_macos_brew_failure(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="brew"),
            patch("docker_wine.bridge.subprocess.run", return_value=completed(1)),
        ):
            with pytest.raises(DisplayServerInstallError):
                HostBridge(MagicMock()).ensure_display_reachable(HostPlatform.MACOS)


class TestAudio:
    """ensure_audio_socket degrades to None instead of failing."""

    def test_existing_socket(self) -> None:
        with patch("docker_wine.bridge.Path.exists", return_value=True):
            assert HostBridge().ensure_audio_socket() == "/tmp/pulse-socket"

    def test_no_pactl(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value=None),
        ):
            assert HostBridge().ensure_audio_socket() is None

    def test_pactl_loads_module(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="/usr/bin/pactl"),
            patch("docker_wine.bridge.subprocess.run", return_value=completed()) as mock_run,
        ):
            assert HostBridge().ensure_audio_socket() == "/tmp/pulse-socket"
            cmd = mock_run.call_args.args[0]
            assert cmd[1:3] == ["load-module", "module-native-protocol-unix"]
            assert cmd[-1] == "socket=/tmp/pulse-socket"

    def test_pactl_fails(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="/usr/bin/pactl"),
            patch("docker_wine.bridge.subprocess.run", return_value=completed(1, stderr="x")),
        ):
            assert HostBridge().ensure_audio_socket() is None

    def test_pactl_timeout(self) -> None:
        with (
            patch("docker_wine.bridge.Path.exists", return_value=False),
            patch("docker_wine.bridge.shutil.which", return_value="/usr/bin/pactl"),
            patch(
                "docker_wine.bridge.subprocess.run",
                side_effect=subprocess.TimeoutExpired(cmd="pactl", timeout=30),
            ),
        ):
            assert HostBridge().ensure_audio_socket() is None
