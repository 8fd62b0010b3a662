"""
Shared CLI plumbing: the per-invocation container and error reporting.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import typer
from rich.markup import escape

from citoken.application.container import Container
from citoken.domain.errors import CitokenError
from citoken.interface.cli.formatters import console

logger = logging.getLogger(__name__)


def get_container(ctx: typer.Context) -> Container:
    """Container created by the root callback, or a default one."""
    root = ctx.find_root()
    if not isinstance(root.obj, Container):
        root.obj = Container()
    return root.obj


@contextmanager
def cli_errors() -> Iterator[None]:
    """Report citoken and missing-file errors in red and exit with status 1."""
    try:
        yield
    except (CitokenError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def prompt_for_code(url: str) -> str:
    console.print("\n[bold]Authorize access in the browser:[/bold]")
    console.print(url, soft_wrap=True)
    return typer.prompt("Paste the authorization code or the full redirect URL")
