"""CLI utilities for docker-wine.

Docker availability check, with Docker Desktop auto-start on macOS.
"""

from __future__ import annotations

import platform
import subprocess
import time

from rich.console import Console

from .. import docker
from ..constants import DOCKER_CHECK_INTERVAL, DOCKER_COMMAND_TIMEOUT, DOCKER_STARTUP_TIMEOUT

console = Console(stderr=True)

ERR_DOCKER_NOT_RUNNING = "Docker is not installed or not running."


def _check_docker_status() -> bool:
    """Check if Docker daemon is responsive."""
    return docker.check_docker_status()


def _start_docker_desktop() -> bool:
    """Ask macOS to open Docker Desktop. Other hosts run the daemon as a service."""
    if platform.system() != "Darwin":
        return False
    try:
        result = subprocess.run(
            ["open", "-a", "Docker"],
            capture_output=True,
            check=False,
            timeout=DOCKER_COMMAND_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def check_docker(auto_start: bool = True) -> bool:
    """Check if Docker is available and running, optionally auto-start."""
    if _check_docker_status():
        return True

    if auto_start and _start_docker_desktop():
        console.print("[dim]Docker not running, waiting for Docker Desktop...[/dim]")
        for i in range(DOCKER_STARTUP_TIMEOUT):
            time.sleep(1)
            if _check_docker_status():
                console.print("[green]Docker started[/green]")
                return True
            if i % DOCKER_CHECK_INTERVAL == DOCKER_CHECK_INTERVAL - 1:
                console.print(f"[dim]Waiting for Docker... ({i + 1}s)[/dim]")
    return False
