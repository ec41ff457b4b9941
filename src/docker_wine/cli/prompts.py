"""User prompts for docker-wine."""

from __future__ import annotations

import click
from rich.console import Console

from ..constants import INSTALL_PROMPT_ATTEMPTS
from ..errors import InstallDeclined, InstallPromptExhausted

console = Console(stderr=True)

YES_ANSWERS = frozenset({"y", "yes"})
NO_ANSWERS = frozenset({"n", "no"})


def parse_yes_no(answer: str) -> bool | None:
    """Return True/False for a yes/no answer, None if it is neither."""
    answer = answer.strip().lower()
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    return None


def confirm_install(question: str, *, attempts: int = INSTALL_PROMPT_ATTEMPTS) -> None:
    """Ask before installing host software.

    Returns normally if the user agrees.

    Raises:
        InstallDeclined: The user answered no.
        InstallPromptExhausted: No valid answer within ``attempts`` tries.
    """
    for _ in range(attempts):
        choice = parse_yes_no(click.prompt(f"{question} [y/n]", default="", show_default=False))
        if choice is True:
            return
        if choice is False:
            raise InstallDeclined("Installation cancelled.")
        console.print("[red]Please answer y or n.[/red]")
    raise InstallPromptExhausted(f"No valid answer after {attempts} attempts")
