"""Password handling for the container user.

The image sets the user's password with ``chpasswd -e``, so the launcher only
ever passes an MD5-crypt digest (``$1$<salt>$<hash>``) into the container.
"""

from __future__ import annotations

from typing import Callable

import click
from passlib.hash import md5_crypt

from .errors import EmptyCredentialError
from .logging import get_logger

logger = get_logger(__name__)

SALT_SIZE = 8  # 8 hash64 chars = 48 bits of entropy


def encrypt_password(plaintext: str) -> str:
    """Hash a plaintext password with a fresh random salt.

    Raises:
        EmptyCredentialError: If the password is empty.
    """
    if not plaintext:
        raise EmptyCredentialError("Password cannot be empty")
    return md5_crypt.using(salt_size=SALT_SIZE).hash(plaintext)


def verify_password(plaintext: str, encrypted: str) -> bool:
    """Check a plaintext password against an MD5-crypt digest."""
    try:
        return md5_crypt.verify(plaintext, encrypted)
    except ValueError:
        logger.debug("Not an MD5-crypt digest: %r", encrypted)
        return False


def read_hidden_password() -> str:
    """Read a password from the terminal without echo."""
    return click.prompt("Password", hide_input=True, default="", show_default=False)


def prompt_password(reader: Callable[[], str] | None = None) -> str:
    """Prompt for a password and return its digest.

    Args:
        reader: Input function, defaults to a hidden terminal prompt.

    Raises:
        EmptyCredentialError: If nothing was entered.
    """
    plaintext = (reader or read_hidden_password)()
    return encrypt_password(plaintext)
