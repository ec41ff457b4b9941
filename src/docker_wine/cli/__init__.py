"""CLI package for docker-wine.

- __init__: the click entry point, usage text and error-to-exit-code mapping
- run: carrying out a launch plan with docker
- prompts: interactive questions
- utils: Docker availability check

Option parsing is not done by click: the flags only accept ``--name=value``
and the first non-flag token starts the container command, so click passes
the raw arguments through to docker_wine.options.parse_args.
"""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..bridge import HostBridge, detect_platform
from ..engine import decide
from ..errors import (
    DockerNotRunningError,
    DockerWineError,
    EarlyExit,
    HelpRequested,
    UsageError,
)
from ..logging import configure, get_logger
from ..options import OPTIONS, parse_args
from .prompts import confirm_install
from .run import execute_plan
from .utils import ERR_DOCKER_NOT_RUNNING, check_docker

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

__all__ = ["cli", "print_usage", "check_docker"]


def print_usage() -> None:
    """Print the usage text and option table."""
    console.print(f"docker-wine {__version__} - run Wine in a Docker container\n")
    console.print("Usage: docker-wine [OPTIONS] [COMMAND [ARG...]]\n")
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Option", style="cyan", no_wrap=True)
    table.add_column("Description")
    for option in OPTIONS:
        table.add_row(option.usage, option.help)
    table.add_row("--help", "Show this message and exit")
    console.print(table)
    console.print("\n[dim]Without --rdp, windows are shown on the host display via X11.[/dim]")
    console.print("[dim]Example: docker-wine --as-me --volume=$PWD:/data wine notepad[/dim]")


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(args: tuple[str, ...]) -> None:
    """docker-wine - Run Wine in a Docker container over X11 or RDP."""
    configure()
    tokens = list(args)

    try:
        # Usage needs no daemon.
        if tokens[:1] == ["--help"]:
            raise HelpRequested()
        if not check_docker():
            raise DockerNotRunningError(ERR_DOCKER_NOT_RUNNING)
        config = parse_args(tokens)
        plan = decide(config, detect_platform(), HostBridge(confirm_install))
        returncode = execute_plan(plan)
    except HelpRequested:
        print_usage()
        sys.exit(0)
    except UsageError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        print_usage()
        sys.exit(1)
    except EarlyExit as e:
        err_console.print(f"[yellow]{e}[/yellow]")
        sys.exit(0)
    except DockerWineError as e:
        logger.debug("Aborting on %s", type(e).__name__)
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    sys.exit(returncode)


if __name__ == "__main__":  # pragma: no cover
    cli()
