"""Docker operations for docker-wine.

Thin wrappers over the docker CLI, kept apart from the CLI layer so they can
be tested with a mocked subprocess.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from .constants import DOCKER_COMMAND_TIMEOUT
from .errors import ContainerError, DockerNotFoundError, DockerTimeoutError, ImagePullError
from .logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "safe_docker_run",
    "check_docker_status",
    "volume_exists",
    "create_volume",
    "ensure_volume",
    "pull_image",
    "kill_container",
    "run_container",
]


def safe_docker_run(
    cmd: Sequence[str],
    *,
    timeout: int | None = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a Docker command with consistent error handling.

    Args:
        cmd: Command to run (should start with 'docker').
        timeout: Command timeout in seconds, None for no limit.
        capture_output: Capture stdout/stderr if True.
        check: Raise CalledProcessError on non-zero exit.

    Raises:
        DockerNotFoundError: If docker command is not found.
        DockerTimeoutError: If command times out.
        subprocess.CalledProcessError: If check=True and command fails.
    """
    cmd_str = " ".join(cmd)
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e
    logger.debug("Docker command completed: exit=%d", result.returncode)
    return result


def check_docker_status() -> bool:
    """Check if Docker daemon is responsive."""
    try:
        return safe_docker_run(["docker", "info"]).returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def volume_exists(name: str) -> bool:
    result = safe_docker_run(["docker", "volume", "inspect", name])
    return result.returncode == 0


def create_volume(name: str) -> None:
    """Create a named volume.

    Raises:
        ContainerError: If docker refuses.
    """
    result = safe_docker_run(["docker", "volume", "create", name])
    if result.returncode != 0:
        raise ContainerError(f"Could not create volume '{name}': {result.stderr.strip()}")


def ensure_volume(name: str) -> bool:
    """Create the volume unless it already exists. Returns True if it was created."""
    if volume_exists(name):
        return False
    logger.info("Creating volume %s", name)
    create_volume(name)
    return True


def pull_image(image: str) -> None:
    """Pull an image, streaming docker's progress to the terminal.

    Raises:
        ImagePullError: If the pull fails.
    """
    try:
        result = safe_docker_run(["docker", "pull", image], timeout=None, capture_output=False)
    except DockerNotFoundError as e:
        raise ImagePullError(str(e)) from e
    if result.returncode != 0:
        raise ImagePullError(f"Failed to pull {image} (exit code {result.returncode})")


def kill_container(name: str) -> bool:
    """Kill a running container. Returns False if docker could not kill it."""
    result = safe_docker_run(["docker", "kill", name])
    if result.returncode != 0:
        logger.debug("docker kill %s: %s", name, result.stderr.strip())
    return result.returncode == 0


def run_container(cmd: Sequence[str], *, detached: bool) -> subprocess.CompletedProcess[str]:
    """Run a prepared ``docker run`` command.

    Interactive runs are attached to the terminal; detached runs capture the
    container id.
    """
    return safe_docker_run(cmd, timeout=None, capture_output=detached)
