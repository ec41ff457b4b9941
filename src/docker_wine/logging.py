"""Logging setup for docker-wine.

User-facing output goes through rich consoles; this module only covers the
diagnostic side (docker command lines, bridge decisions, skipped steps).

Usage:
    from docker_wine.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("docker command: %s", cmd)

Debug output is enabled with DOCKER_WINE_DEBUG=1 (also "true" or "yes").
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "docker_wine"
DEBUG_ENV_VAR = "DOCKER_WINE_DEBUG"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def debug_requested(environ: dict[str, str] | None = None) -> bool:
    """Return True if the debug environment variable asks for debug output."""
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes")


def _formatter(debug: bool) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if debug else LOG_FORMAT, datefmt=DATE_FORMAT)


def configure(debug: bool | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger (once) and set its level.

    Args:
        debug: Force debug on or off. None reads DOCKER_WINE_DEBUG.

    Returns:
        The package root logger.
    """
    global _configured
    if debug is None:
        debug = debug_requested()
    level = logging.DEBUG if debug else logging.WARNING

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    if not _configured and not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stderr))
    for handler in root.handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter(debug))

    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the docker_wine namespace.

    Args:
        name: Module name (typically __name__).
    """
    if not _configured:
        configure()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
