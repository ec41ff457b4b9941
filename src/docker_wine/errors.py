"""Unified exception hierarchy for docker-wine.

All custom exceptions inherit from DockerWineError for consistent error handling.
The CLI catches these and converts them to console messages and exit codes.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other docker_wine modules.
    It should NOT import from any other docker_wine modules.
"""

from __future__ import annotations


class DockerWineError(Exception):
    """Base exception for all docker-wine errors."""


class UsageError(DockerWineError):
    """Command line could not be parsed. The CLI prints usage and exits 1."""


class UnknownOptionError(UsageError):
    """Raised for an unrecognized flag, or a value flag used without '=value'."""

    def __init__(self, option: str) -> None:
        super().__init__(f"unknown option: {option}")
        self.option = option


class HelpRequested(UsageError):
    """Raised when --help is seen. Not a failure: the CLI exits 0."""


class ValidationError(DockerWineError):
    """Input validation errors.

    Examples:
        - Empty password
        - Invalid --rdp mode
        - Command given together with RDP
    """


class EmptyCredentialError(ValidationError):
    """Raised when a plaintext or prompted password is empty."""


class InvalidOptionError(ValidationError):
    """Raised when a recognized flag carries an unusable value."""


class InvalidRdpModeError(InvalidOptionError):
    """Raised when --rdp=MODE names an unknown mode."""


class RdpCommandConflictError(ValidationError):
    """Raised when a container command is given together with an RDP mode."""


class UnsupportedPlatformError(ValidationError):
    """Raised when X11 forwarding is requested on a host other than macOS/Linux."""


class MissingXAuthorityError(ValidationError):
    """Raised when no X authority file exists for X11 forwarding on Linux."""


class DockerError(DockerWineError):
    """Docker operation errors.

    Base class for all Docker-related exceptions.
    """


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerNotRunningError(DockerError):
    """Raised when Docker daemon is not running."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class ContainerError(DockerError):
    """Raised when container operations fail."""


class ImagePullError(DockerError):
    """Raised when pulling the Wine image fails."""


class ExternalToolError(DockerWineError):
    """Failure of a host tool other than Docker (brew, XQuartz)."""


class DisplayServerInstallError(ExternalToolError):
    """Raised when the display server could not be installed."""


class InstallPromptExhausted(ExternalToolError):
    """Raised when the user gives no valid answer to an install prompt."""


class EarlyExit(DockerWineError):
    """Stop the run without failing. The CLI prints the message and exits 0."""


class HostRestartRequired(EarlyExit):
    """A one-time host configuration change needs a reboot before Wine can run."""


class InstallDeclined(EarlyExit):
    """The user declined an optional installation."""
