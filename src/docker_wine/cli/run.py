"""Run operations for docker-wine.

Carries out a LaunchPlan: pull, volume creation, kill, docker run.
"""

from __future__ import annotations

import sys

from rich.console import Console

from .. import docker
from ..engine import LaunchPlan, Outcome
from ..errors import ContainerError
from ..logging import get_logger

console = Console(stderr=True)
logger = get_logger(__name__)


def stop_container(name: str, *, required: bool) -> None:
    """Kill the container.

    Args:
        name: Container name.
        required: If True, failing to kill is an error; otherwise it only
            means nothing was running.
    """
    if docker.kill_container(name):
        console.print(f"[dim]Stopped container {name}[/dim]")
    elif required:
        raise ContainerError(f"Could not stop container '{name}' (is it running?)")
    else:
        logger.info("Container %s was not running", name)


def prepare_image(plan: LaunchPlan) -> None:
    """Pull the image if requested and create the default home volume."""
    if plan.pull:
        console.print(f"[dim]Pulling {plan.image}...[/dim]")
        docker.pull_image(plan.image or "")
    if plan.create_volume and docker.ensure_volume(plan.create_volume):
        console.print(f"[dim]Created volume {plan.create_volume}[/dim]")


def launch(plan: LaunchPlan) -> int:
    """Start the container. Returns the exit code to report."""
    prepare_image(plan)
    cmd = plan.docker_run_cmd(tty=sys.stdin.isatty())
    logger.debug("docker run: %s", cmd)

    if plan.outcome.detached:
        result = docker.run_container(cmd, detached=True)
        if result.returncode != 0:
            raise ContainerError(f"Failed to start container: {result.stderr.strip()}")
        console.print(f"[green]RDP server listening on localhost:{plan.rdp_port}[/green]")
        return 0

    try:
        return docker.run_container(cmd, detached=False).returncode
    except KeyboardInterrupt:
        return 130  # Standard Ctrl+C code


def execute_plan(plan: LaunchPlan) -> int:
    """Dispatch a plan to docker according to its outcome."""
    logger.info("Executing %s", plan.outcome.value)
    if plan.outcome is Outcome.KILL:
        stop_container(plan.container, required=True)
        return 0
    if plan.outcome is Outcome.KILL_THEN_LAUNCH_DETACHED:
        stop_container(plan.container, required=False)
    return launch(plan)
