"""Launch configuration for docker-wine.

LaunchConfiguration bundles every command line option into one immutable
object. The option parser builds it flag by flag with dataclasses.replace;
the decision engine only reads it.
"""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass
from enum import Enum

from .constants import (
    DEFAULT_HOME_VOLUME,
    DEFAULT_RDP_PORT,
    DEFAULT_TAG,
    DEFAULT_USER,
    REMOTE_IMAGE,
)


class RdpMode(str, Enum):
    """Value of --rdp. DISABLED means X11 forwarding."""

    DISABLED = "no"
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    INTERACTIVE = "interactive"


class Identity(str, Enum):
    """User context the container process runs as."""

    ROOT = "root"
    CURRENT_USER = "current-user"
    DEFAULT_IMAGE_USER = "default"


class ImageKind(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class ImageSource:
    """Image to run, before any pull."""

    kind: ImageKind
    name: str
    tag: str

    @property
    def reference(self) -> str:
        return f"{self.name}:{self.tag}"


@dataclass(frozen=True)
class CurrentUser:
    """Snapshot of the host user, passed into the container so files keep their owner."""

    name: str
    uid: int
    gid: int

    @classmethod
    def capture(cls) -> CurrentUser:
        """Read the host user now. Called while parsing, not at launch."""
        return cls(name=getpass.getuser(), uid=os.getuid(), gid=os.getgid())


def default_home(user: CurrentUser | None) -> str:
    """Container home directory for the given user (or the image user)."""
    return f"/home/{user.name if user else DEFAULT_USER}"


@dataclass(frozen=True)
class LaunchConfiguration:
    """All options for one docker-wine run.

    Scalar fields are last-wins. ``passthrough`` accumulates every --device,
    --env and --volume token in the order given, unchanged.
    """

    # Image selection
    local_image: str | None = None
    tag: str = DEFAULT_TAG
    pull: bool = True

    # Identity
    run_as_root: bool = False
    user: CurrentUser | None = None

    # Home and working directory
    home_volume: str = DEFAULT_HOME_VOLUME
    home_path: str | None = None
    workdir: str | None = None

    # Encrypted password for the container user
    credential: str | None = None

    # Pass-through docker arguments
    passthrough: tuple[str, ...] = ()

    # RDP
    rdp_mode: RdpMode = RdpMode.DISABLED
    rdp_port: int = DEFAULT_RDP_PORT

    force_owner: bool = False
    command: tuple[str, ...] = ()

    @property
    def image_source(self) -> ImageSource:
        if self.local_image is not None:
            return ImageSource(ImageKind.LOCAL, self.local_image, self.tag)
        return ImageSource(ImageKind.REMOTE, REMOTE_IMAGE, self.tag)

    @property
    def identity(self) -> Identity:
        if self.run_as_root:
            return Identity.ROOT
        if self.user is not None:
            return Identity.CURRENT_USER
        return Identity.DEFAULT_IMAGE_USER

    @property
    def resolved_home_path(self) -> str:
        return self.home_path if self.home_path is not None else default_home(self.user)

    @property
    def resolved_workdir(self) -> str:
        # Root always starts in /, whatever --workdir said.
        if self.identity is Identity.ROOT:
            return "/"
        return self.workdir if self.workdir is not None else self.resolved_home_path

