"""Command line option parsing for docker-wine.

parse_args() folds the argument list left to right into a LaunchConfiguration.
Each flag handler returns the fields it changes. --device, --env and --volume
append to one shared pass-through list; everything else is replaced, so later
flags win for scalars.

Value-bearing flags only accept the ``--name=value`` form. ``--tag latest`` is
an unknown option, not a tag.

Identity capture is a snapshot: ``--as-me`` (or a non-default
``--home-volume``) reads the host user at the point where it appears and
resets the home path, so a ``--home`` given before it is discarded while one
given after it is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from .constants import DEFAULT_HOME_VOLUME, LOCAL_IMAGE
from .credentials import encrypt_password, prompt_password
from .errors import (
    HelpRequested,
    InvalidOptionError,
    InvalidRdpModeError,
    RdpCommandConflictError,
    UnknownOptionError,
)
from .launch_config import CurrentUser, LaunchConfiguration, RdpMode
from .logging import get_logger

logger = get_logger(__name__)


class ValueKind(Enum):
    NONE = "none"  # --flag
    REQUIRED = "required"  # --flag=value
    OPTIONAL = "optional"  # --flag or --flag=value


@dataclass(frozen=True)
class ParseContext:
    """Host lookups the handlers need, replaceable in tests."""

    capture_user: Callable[[], CurrentUser] = CurrentUser.capture
    read_password: Callable[[], str] | None = None


Delta = dict[str, object]
Handler = Callable[[str | None, ParseContext], Delta]


@dataclass(frozen=True)
class Option:
    name: str
    kind: ValueKind
    handler: Handler
    help: str
    metavar: str = ""
    allow_empty: bool = False

    @property
    def usage(self) -> str:
        if self.kind is ValueKind.REQUIRED:
            return f"{self.name}={self.metavar}"
        if self.kind is ValueKind.OPTIONAL:
            return f"{self.name}[={self.metavar}]"
        return self.name


def _snapshot_user(ctx: ParseContext) -> Delta:
    return {"user": ctx.capture_user(), "home_path": None}


def _home_volume(value: str | None, ctx: ParseContext) -> Delta:
    delta: Delta = {"home_volume": value}
    if value != DEFAULT_HOME_VOLUME:
        # Host paths and custom volumes keep the host user's ownership.
        delta.update(_snapshot_user(ctx))
    return delta


def _rdp(value: str | None, ctx: ParseContext) -> Delta:
    if value is None:
        return {"rdp_mode": RdpMode.INTERACTIVE}
    try:
        return {"rdp_mode": RdpMode(value)}
    except ValueError:
        choices = "|".join(mode.value for mode in RdpMode)
        raise InvalidRdpModeError(f"invalid --rdp mode '{value}' (expected {choices})") from None


def _rdp_port(value: str | None, ctx: ParseContext) -> Delta:
    try:
        port = int(value or "")
    except ValueError:
        raise InvalidOptionError(f"--rdp-port must be a number, got '{value}'") from None
    if not 1 <= port <= 65535:
        raise InvalidOptionError(f"--rdp-port must be between 1 and 65535, got {port}")
    return {"rdp_port": port}


def _password_prompt(value: str | None, ctx: ParseContext) -> Delta:
    return {"credential": prompt_password(ctx.read_password)}


def _passthrough(flag: str) -> Handler:
    def handler(value: str | None, ctx: ParseContext) -> Delta:
        return {"passthrough": (f"{flag}={value}",)}

    return handler


def _set(field_name: str, value: object) -> Handler:
    def handler(_: str | None, ctx: ParseContext) -> Delta:
        return {field_name: value}

    return handler


def _store(field_name: str) -> Handler:
    def handler(value: str | None, ctx: ParseContext) -> Delta:
        return {field_name: value}

    return handler


def _local(value: str | None, ctx: ParseContext) -> Delta:
    return {"local_image": value or LOCAL_IMAGE}


def _as_me(value: str | None, ctx: ParseContext) -> Delta:
    return _snapshot_user(ctx)


def _password(value: str | None, ctx: ParseContext) -> Delta:
    return {"credential": encrypt_password(value or "")}


OPTIONS: tuple[Option, ...] = (
    Option("--cache", ValueKind.NONE, _set("pull", False), "Use the cached image, do not pull"),
    Option(
        "--local",
        ValueKind.OPTIONAL,
        _local,
        f"Use a locally built image (default: {LOCAL_IMAGE}), never pulled",
        "IMAGE",
    ),
    Option("--tag", ValueKind.REQUIRED, _store("tag"), "Image tag (default: latest)", "TAG"),
    Option(
        "--as-root",
        ValueKind.NONE,
        _set("run_as_root", True),
        "Run as root inside the container (working directory is /)",
    ),
    Option("--as-me", ValueKind.NONE, _as_me, "Run as the current host user (name, uid, gid)"),
    Option(
        "--rdp",
        ValueKind.OPTIONAL,
        _rdp,
        "RDP server mode: no, start, stop, restart or interactive (default)",
        "MODE",
        allow_empty=True,
    ),
    Option(
        "--rdp-port",
        ValueKind.REQUIRED,
        _rdp_port,
        "Host port published for RDP (default: 3389)",
        "PORT",
    ),
    Option(
        "--home-volume",
        ValueKind.REQUIRED,
        _home_volume,
        f"Volume or host path mounted as home (default: {DEFAULT_HOME_VOLUME}), implies --as-me",
        "VALUE",
    ),
    Option(
        "--home",
        ValueKind.REQUIRED,
        _store("home_path"),
        "Home directory in the container",
        "PATH",
    ),
    Option(
        "--force-owner",
        ValueKind.NONE,
        _set("force_owner", True),
        "Take ownership of the home directory even if owned by someone else",
    ),
    Option(
        "--password",
        ValueKind.REQUIRED,
        _password,
        "Password for the container user (needed for RDP logins)",
        "VALUE",
        allow_empty=True,
    ),
    Option(
        "--password-prompt",
        ValueKind.NONE,
        _password_prompt,
        "Prompt for the container user's password",
    ),
    Option(
        "--secure-password",
        ValueKind.REQUIRED,
        _store("credential"),
        "Already encrypted password, passed through unchanged",
        "HASH",
    ),
    Option(
        "--device",
        ValueKind.REQUIRED,
        _passthrough("--device"),
        "Add a host device (repeatable)",
        "VALUE",
    ),
    Option(
        "--env",
        ValueKind.REQUIRED,
        _passthrough("--env"),
        "Set an environment variable (repeatable)",
        "VALUE",
    ),
    Option(
        "--volume",
        ValueKind.REQUIRED,
        _passthrough("--volume"),
        "Bind mount a volume (repeatable)",
        "VALUE",
    ),
    Option(
        "--workdir",
        ValueKind.REQUIRED,
        _store("workdir"),
        "Working directory in the container (default: home)",
        "PATH",
    ),
)


_BY_NAME: dict[str, Option] = {option.name: option for option in OPTIONS}
_APPENDED_FIELDS = frozenset({"passthrough"})


def match_option(token: str) -> tuple[Option, str | None]:
    """Find the option a flag token refers to.

    Returns:
        The option and its value (None for the bare form).

    Raises:
        UnknownOptionError: If no option accepts the token as written.
    """
    name, sep, value = token.partition("=")
    option = _BY_NAME.get(name)
    if option is None:
        raise UnknownOptionError(token)

    if not sep:
        if option.kind is ValueKind.REQUIRED:
            raise UnknownOptionError(token)
        return option, None

    if option.kind is ValueKind.NONE or (not value and not option.allow_empty):
        raise UnknownOptionError(token)
    return option, value


def apply_delta(config: LaunchConfiguration, delta: Delta) -> LaunchConfiguration:
    """Merge handler output into the configuration."""
    changes = dict(delta)
    for key in _APPENDED_FIELDS & changes.keys():
        changes[key] = getattr(config, key) + changes[key]
    return replace(config, **changes)


def parse_args(args: list[str], context: ParseContext | None = None) -> LaunchConfiguration:
    """Build a LaunchConfiguration from the raw argument list.

    Args:
        args: Arguments after the program name.
        context: Host lookups (user snapshot, password input).

    Raises:
        HelpRequested: On --help; nothing after it is read.
        UnknownOptionError: On an unknown or malformed flag.
        ValidationError: On a bad option value or RDP/command conflict.
    """
    ctx = context or ParseContext()
    config = LaunchConfiguration()

    for index, token in enumerate(args):
        if not token.startswith("-"):
            config = replace(config, command=tuple(args[index:]))
            break
        if token == "--help":
            raise HelpRequested()
        option, value = match_option(token)
        config = apply_delta(config, option.handler(value, ctx))
        logger.debug("Parsed %s", option.name)

    if config.rdp_mode is not RdpMode.DISABLED and config.command:
        raise RdpCommandConflictError("Commands cannot be used together with --rdp")
    return config
