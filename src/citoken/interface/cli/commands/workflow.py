"""
Workflow commands - setup, rotate and check, registered on the root app.
"""

from typing import Optional

import typer

from citoken.domain.config import EncryptionMode
from citoken.interface.cli.context import cli_errors, get_container, prompt_for_code
from citoken.interface.cli.formatters import console, display_issues, display_setup


def setup(
    ctx: typer.Context,
    mode: Optional[EncryptionMode] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Encryption mode override (external or local)"
    )
):
    """
    Acquire a token, store it, encrypt it for CI and update the manifests.

    Refuses to run when a plaintext token already exists; use `rotate` to replace it.
    """
    container = get_container(ctx)
    with cli_errors():
        path = container.config.plaintext_path
        if container.store.exists(path):
            console.print(f"[yellow]⚠️ {path} already exists; use `citoken rotate` to replace it[/yellow]")
            raise typer.Exit(1)
        result = container.workflow_service.setup(prompt_for_code, mode=mode)
    display_setup(result)


def rotate(
    ctx: typer.Context,
    mode: Optional[EncryptionMode] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Encryption mode override (external or local)"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Rotate without confirmation"
    )
):
    """
    Discard the current token and redo the whole procedure.

    Use when the provider's token quota is exhausted or the token was revoked.
    """
    container = get_container(ctx)
    if not force and not typer.confirm("Discard the current token and acquire a new one?"):
        typer.echo("Cancelled")
        return
    with cli_errors():
        result = container.workflow_service.rotate(prompt_for_code, mode=mode)
    display_setup(result)


def check(ctx: typer.Context):
    """
    Check every rule of the encrypted-file pattern.

    Exits with status 1 when any error-level issue is found.
    """
    container = get_container(ctx)
    with cli_errors():
        issues = container.workflow_service.check()
    display_issues(issues)
    if any(issue.is_error for issue in issues):
        raise typer.Exit(1)
