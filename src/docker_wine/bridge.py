"""Host display and audio setup for X11 forwarding.

macOS needs XQuartz accepting TCP connections from the Docker VM; Linux needs
nothing for the display and optionally a PulseAudio socket for sound.
"""

from __future__ import annotations

import platform
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import Callable

from .constants import HOST_COMMAND_TIMEOUT, PULSE_SOCKET, XQUARTZ_APP, XQUARTZ_DOMAIN
from .errors import DisplayServerInstallError, ExternalToolError, UnsupportedPlatformError
from .logging import get_logger

logger = get_logger(__name__)

XHOST_FALLBACK = "/opt/X11/bin/xhost"


class HostPlatform(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"


class DisplayStatus(Enum):
    READY = "ready"
    NEEDS_REBOOT = "needs-reboot"


def detect_platform(system: str | None = None) -> HostPlatform:
    """Map platform.system() onto the hosts docker-wine knows about."""
    name = system if system is not None else platform.system()
    if name == "Darwin":
        return HostPlatform.MACOS
    if name == "Linux":
        return HostPlatform.LINUX
    return HostPlatform.UNSUPPORTED


def _run_host(
    cmd: list[str], *, timeout: int | None = HOST_COMMAND_TIMEOUT
) -> subprocess.CompletedProcess[str]:
    logger.debug("Running host command: %s", " ".join(cmd))
    return subprocess.run(cmd, capture_output=True, text=True, check=False, timeout=timeout)


def _default_confirm(question: str) -> None:
    from .cli.prompts import confirm_install

    confirm_install(question)


class HostBridge:
    """Display server and audio socket setup on the host.

    Args:
        confirm_install: Asks before installing software. Returns to proceed,
            raises InstallDeclined or InstallPromptExhausted otherwise.
    """

    def __init__(self, confirm_install: Callable[[str], None] | None = None) -> None:
        self._confirm_install = confirm_install or _default_confirm

    def ensure_display_reachable(self, host: HostPlatform) -> DisplayStatus:
        """Make the host X server accept the container's connections."""
        if host is HostPlatform.LINUX:
            return DisplayStatus.READY
        if host is HostPlatform.MACOS:
            return self._ensure_xquartz()
        raise UnsupportedPlatformError(
            f"X11 forwarding needs a macOS or Linux host, got '{host.value}'"
        )

    def ensure_audio_socket(self) -> str | None:
        """Return a PulseAudio socket path for the container, or None for no sound."""
        if Path(PULSE_SOCKET).exists():
            return PULSE_SOCKET
        pactl = shutil.which("pactl")
        if pactl is None:
            logger.info("pactl not found, running without sound")
            return None
        try:
            result = _run_host(
                [pactl, "load-module", "module-native-protocol-unix", f"socket={PULSE_SOCKET}"]
            )
        except subprocess.TimeoutExpired:
            logger.warning("pactl timed out, running without sound")
            return None
        if result.returncode != 0:
            logger.info("pactl failed (%s), running without sound", result.stderr.strip())
            return None
        return PULSE_SOCKET

    def _ensure_xquartz(self) -> DisplayStatus:
        if not Path(XQUARTZ_APP).exists():
            self._install_xquartz()
            return DisplayStatus.NEEDS_REBOOT
        if not self._tcp_enabled():
            self._enable_tcp()
            return DisplayStatus.NEEDS_REBOOT
        self._allow_loopback()
        return DisplayStatus.READY

    def _install_xquartz(self) -> None:
        brew = shutil.which("brew")
        if brew is None:
            raise DisplayServerInstallError(
                "XQuartz is not installed and Homebrew was not found. "
                "Install XQuartz from https://www.xquartz.org and try again."
            )
        self._confirm_install("XQuartz is required for X11 forwarding. Install it with Homebrew?")
        logger.info("Installing XQuartz")
        result = subprocess.run([brew, "install", "--cask", "xquartz"], check=False)
        if result.returncode != 0:
            raise DisplayServerInstallError(
                f"brew install xquartz failed with code {result.returncode}"
            )
        self._enable_tcp()

    def _tcp_enabled(self) -> bool:
        try:
            result = _run_host(["defaults", "read", XQUARTZ_DOMAIN, "nolisten_tcp"])
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False
        return result.returncode == 0 and result.stdout.strip() == "0"

    def _enable_tcp(self) -> None:
        try:
            result = _run_host(["defaults", "write", XQUARTZ_DOMAIN, "nolisten_tcp", "-int", "0"])
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise ExternalToolError(f"Could not configure XQuartz: {e}") from e
        if result.returncode != 0:
            raise ExternalToolError(f"Could not configure XQuartz: {result.stderr.strip()}")

    def _allow_loopback(self) -> None:
        xhost = shutil.which("xhost") or XHOST_FALLBACK
        try:
            result = _run_host([xhost, "+", "127.0.0.1"])
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise ExternalToolError(f"Could not run xhost: {e}") from e
        if result.returncode != 0:
            raise ExternalToolError(
                f"xhost could not allow connections from 127.0.0.1: {result.stderr.strip()}"
            )
