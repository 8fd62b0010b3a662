"""
Branch Command CLI - Per-branch packaging of the plaintext token.
"""

from typing import Optional

import typer

from citoken.interface.cli.context import cli_errors, get_container
from citoken.interface.cli.formatters import display_packaging_status

branch_app = typer.Typer(
    name="branch",
    help="🌿 Control whether the plaintext token ships in the package",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@branch_app.command("status")
def status(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Branch to check (defaults to the current one)")
):
    """Show the branch role and whether the distribution ignore list agrees."""
    container = get_container(ctx)
    with cli_errors():
        result = container.packaging_filter.status(branch)
    if result.ok:
        display_packaging_status(result.value)
    else:
        display_packaging_status(result.error)
        raise typer.Exit(1)


@branch_app.command("apply")
def apply(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(None, help="Branch whose role to apply (defaults to the current one)")
):
    """Edit the distribution ignore list to match the branch role."""
    container = get_container(ctx)
    with cli_errors():
        result = container.packaging_filter.apply(branch)
    display_packaging_status(result)


@branch_app.command("switch")
def switch(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Submission branch (defaults to the first configured)"),
    default: bool = typer.Option(
        False,
        "--default",
        help="Switch back to the default branch instead"
    )
):
    """
    Check out a submission branch and exclude the plaintext token from the package.

    Run before a release submission; use --default to go back.
    """
    container = get_container(ctx)
    with cli_errors():
        packaging = container.packaging_filter
        result = packaging.switch_to_default() if default else packaging.switch_to_submission(name)
    display_packaging_status(result)
