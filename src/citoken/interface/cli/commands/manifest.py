"""
Manifest Command CLI - Ignore lists and CI decrypt step.
"""

from typing import Optional

import typer

from citoken.interface.cli.context import cli_errors, get_container
from citoken.interface.cli.formatters import display_changes, display_issues

manifest_app = typer.Typer(
    name="manifest",
    help="📋 Keep the ignore lists and CI configuration in line",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@manifest_app.command("update")
def update(
    ctx: typer.Context,
    key_var: Optional[str] = typer.Option(None, "--key-var", help="CI variable holding the key"),
    iv_var: Optional[str] = typer.Option(None, "--iv-var", help="CI variable holding the IV")
):
    """
    Add missing ignore entries and the CI decrypt step.

    The plaintext token goes into the version-control ignore list, the
    encrypted token into the distribution ignore list.
    """
    container = get_container(ctx)
    with cli_errors():
        changes = container.manifest_service.update(key_var=key_var, iv_var=iv_var)
    display_changes(changes)


@manifest_app.command("check")
def check(ctx: typer.Context):
    """Check the ignore lists and CI configuration for the current branch."""
    container = get_container(ctx)
    with cli_errors():
        issues = container.workflow_service.manifest_check()
    display_issues(issues)
    if any(issue.is_error for issue in issues):
        raise typer.Exit(1)
