"""Run-mode decisions and docker run argument assembly.

decide() turns a LaunchConfiguration into a LaunchPlan: what to do with the
"wine" container (run interactively, run detached, kill, or kill and run
detached) and, for launches, the exact docker run arguments. The only host
interaction is through the HostBridge in the X11 branch; pulling images and
starting containers is left to the caller.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .bridge import DisplayStatus, HostBridge, HostPlatform
from .constants import (
    CONTAINER_NAME,
    CONTAINER_RDP_PORT,
    CONTAINER_XAUTHORITY,
    DEFAULT_HOME_VOLUME,
    DEFAULT_SHELL,
    ENV_FORCED_OWNERSHIP,
    ENV_RDP_SERVER,
    ENV_RUN_AS_ROOT,
    ENV_USER_GID,
    ENV_USER_HOME,
    ENV_USER_NAME,
    ENV_USER_PASSWD,
    ENV_USER_UID,
    MACOS_DISPLAY,
    X11_SOCKET_DIR,
)
from .errors import (
    HostRestartRequired,
    MissingXAuthorityError,
    RdpCommandConflictError,
    UnsupportedPlatformError,
)
from .launch_config import ImageKind, LaunchConfiguration, RdpMode, default_home
from .logging import get_logger

logger = get_logger(__name__)


class Outcome(str, Enum):
    LAUNCH_INTERACTIVE = "launch-interactive"
    LAUNCH_DETACHED = "launch-detached"
    KILL = "kill"
    KILL_THEN_LAUNCH_DETACHED = "kill-then-launch-detached"

    @property
    def detached(self) -> bool:
        return self in (Outcome.LAUNCH_DETACHED, Outcome.KILL_THEN_LAUNCH_DETACHED)


@dataclass(frozen=True)
class LaunchPlan:
    """Everything the invoker needs for one run.

    For Outcome.KILL only ``outcome`` and ``container`` are meaningful.
    """

    outcome: Outcome
    container: str = CONTAINER_NAME
    image: str | None = None
    pull: bool = False
    create_volume: str | None = None
    run_args: tuple[str, ...] = ()
    command: tuple[str, ...] = ()
    rdp_port: int | None = None

    def docker_run_cmd(self, *, tty: bool = True) -> list[str]:
        """Full ``docker run`` command line for this plan."""
        if self.image is None:
            raise ValueError(f"{self.outcome.value} plan has nothing to run")
        cmd = ["docker", "run", "--rm"]
        if self.outcome.detached:
            cmd.append("--detach")
        else:
            cmd.append("-it" if tty else "-i")
        cmd.extend(self.run_args)
        cmd.append(self.image)
        cmd.extend(self.command)
        return cmd


def xauthority_path(environ: dict[str, str] | None = None) -> Path:
    """X authority file from $XAUTHORITY, or ~/.Xauthority."""
    env = os.environ if environ is None else environ
    configured = env.get("XAUTHORITY")
    if configured:
        return Path(configured)
    return Path(env.get("HOME") or Path.home()) / ".Xauthority"


def _identity_args(config: LaunchConfiguration) -> list[str]:
    args: list[str] = []
    if config.run_as_root:
        args.append(f"--env={ENV_RUN_AS_ROOT}=yes")
    if config.user is not None:
        args.extend(
            [
                f"--env={ENV_USER_NAME}={config.user.name}",
                f"--env={ENV_USER_UID}={config.user.uid}",
                f"--env={ENV_USER_GID}={config.user.gid}",
            ]
        )
    if config.resolved_home_path != default_home(None):
        args.append(f"--env={ENV_USER_HOME}={config.resolved_home_path}")
    if config.credential is not None:
        args.append(f"--env={ENV_USER_PASSWD}={config.credential}")
    if config.force_owner:
        args.append(f"--env={ENV_FORCED_OWNERSHIP}=yes")
    return args


def _rdp_args(port: int) -> list[str]:
    return [f"--env={ENV_RDP_SERVER}=yes", f"--publish={port}:{CONTAINER_RDP_PORT}"]


def x11_args(
    host: HostPlatform, bridge: HostBridge, environ: dict[str, str] | None = None
) -> list[str]:
    """Docker arguments that connect the container to the host display.

    Raises:
        HostRestartRequired: macOS display server was just set up.
        MissingXAuthorityError: Linux host without an X authority file.
        UnsupportedPlatformError: Any other host.
    """
    if host is HostPlatform.MACOS:
        if bridge.ensure_display_reachable(host) is DisplayStatus.NEEDS_REBOOT:
            raise HostRestartRequired(
                "XQuartz has been configured to accept network connections. "
                "Log out or reboot, then run docker-wine again."
            )
        return [f"--env=DISPLAY={MACOS_DISPLAY}"]

    if host is HostPlatform.LINUX:
        xauth = xauthority_path(environ)
        if not xauth.is_file():
            raise MissingXAuthorityError(
                f"X authority file not found: {xauth}. Set XAUTHORITY or use --rdp."
            )
        bridge.ensure_display_reachable(host)
        args = [
            "--env=DISPLAY",
            f"--volume={xauth}:{CONTAINER_XAUTHORITY}:ro",
            f"--volume={X11_SOCKET_DIR}:{X11_SOCKET_DIR}:ro",
        ]
        socket = bridge.ensure_audio_socket()
        if socket:
            args.extend([f"--env=PULSE_SERVER=unix:{socket}", f"--volume={socket}:{socket}"])
        else:
            logger.info("No PulseAudio socket, running without sound")
        return args

    raise UnsupportedPlatformError(
        f"X11 forwarding needs a macOS or Linux host, got '{host.value}'"
    )


def decide(
    config: LaunchConfiguration,
    host: HostPlatform,
    bridge: HostBridge,
    *,
    hostname: str | None = None,
    environ: dict[str, str] | None = None,
) -> LaunchPlan:
    """Choose the run mode and assemble the launch arguments.

    Args:
        config: Parsed options.
        host: Host platform (only consulted for X11 forwarding).
        bridge: Display/audio collaborator for X11 forwarding.
        hostname: Container hostname, defaults to the host's name.
        environ: Environment for XAUTHORITY/HOME lookups.

    Returns:
        The plan to hand to the invoker.
    """
    mode = config.rdp_mode
    if mode is not RdpMode.DISABLED and config.command:
        raise RdpCommandConflictError("Commands cannot be used together with --rdp")
    if mode is RdpMode.STOP:
        return LaunchPlan(outcome=Outcome.KILL)

    if mode is RdpMode.DISABLED:
        outcome = Outcome.LAUNCH_INTERACTIVE
        command = config.command or (DEFAULT_SHELL,)
    elif mode is RdpMode.INTERACTIVE:
        outcome = Outcome.LAUNCH_INTERACTIVE
        command = (DEFAULT_SHELL,)
    elif mode is RdpMode.START:
        outcome = Outcome.LAUNCH_DETACHED
        command = ()
    else:
        outcome = Outcome.KILL_THEN_LAUNCH_DETACHED
        command = ()

    args = [f"--name={CONTAINER_NAME}", f"--hostname={hostname or platform.node()}"]
    args.extend(_identity_args(config))
    if mode is not RdpMode.DISABLED:
        args.extend(_rdp_args(config.rdp_port))
    args.extend(config.passthrough)
    if mode is RdpMode.DISABLED:
        args.extend(x11_args(host, bridge, environ))
    args.append(f"--volume={config.home_volume}:{config.resolved_home_path}")
    args.append(f"--workdir={config.resolved_workdir}")

    source = config.image_source
    plan = LaunchPlan(
        outcome=outcome,
        image=source.reference,
        pull=config.pull and source.kind is ImageKind.REMOTE,
        create_volume=config.home_volume if config.home_volume == DEFAULT_HOME_VOLUME else None,
        run_args=tuple(args),
        command=tuple(command),
        rdp_port=config.rdp_port if mode is not RdpMode.DISABLED else None,
    )
    logger.debug("Launch plan: %s", plan)
    return plan
