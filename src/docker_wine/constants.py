"""Constants module for docker-wine.

All defaults and timeout values are defined here (SSOT).
"""

from __future__ import annotations

# === Images ===
REMOTE_IMAGE = "docker.io/scottyhardy/docker-wine"  # Published image
LOCAL_IMAGE = "docker-wine"  # Default name for --local
DEFAULT_TAG = "latest"

# === Container ===
CONTAINER_NAME = "wine"  # Fixed name so --rdp=stop/restart can find it
DEFAULT_HOME_VOLUME = "winehome"  # Named volume created on first run
DEFAULT_USER = "wineuser"  # Built-in image user
DEFAULT_SHELL = "bash"  # Command when none is given
CONTAINER_RDP_PORT = 3389  # xrdp port inside the container
DEFAULT_RDP_PORT = 3389  # Host side published port

# === Container environment ===
ENV_RUN_AS_ROOT = "RUN_AS_ROOT"
ENV_USER_NAME = "USER_NAME"
ENV_USER_UID = "USER_UID"
ENV_USER_GID = "USER_GID"
ENV_USER_HOME = "USER_HOME"
ENV_USER_PASSWD = "USER_PASSWD"
ENV_FORCED_OWNERSHIP = "FORCED_OWNERSHIP"
ENV_RDP_SERVER = "RDP_SERVER"

# === X11 / audio ===
X11_SOCKET_DIR = "/tmp/.X11-unix"
CONTAINER_XAUTHORITY = "/root/.Xauthority"
MACOS_DISPLAY = "host.docker.internal:0"  # Host loopback alias seen from Docker Desktop
PULSE_SOCKET = "/tmp/pulse-socket"
XQUARTZ_APP = "/Applications/Utilities/XQuartz.app"
XQUARTZ_DOMAIN = "org.xquartz.X11"

# === Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, inspect, volume, kill)
DOCKER_STARTUP_TIMEOUT = 30  # Waiting for Docker Desktop to start
DOCKER_CHECK_INTERVAL = 5  # Seconds between Docker status checks
HOST_COMMAND_TIMEOUT = 30  # defaults, xhost, pactl

# === Prompts ===
INSTALL_PROMPT_ATTEMPTS = 3
