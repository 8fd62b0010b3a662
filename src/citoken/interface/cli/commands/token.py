"""
Token Command CLI - Acquire, inspect and discard the OAuth token.
"""

import typer

from citoken.interface.cli.context import cli_errors, get_container, prompt_for_code
from citoken.interface.cli.formatters import console, display_token

token_app = typer.Typer(
    name="token",
    help="🔑 Acquire, inspect and discard the OAuth token",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@token_app.command("acquire")
def acquire(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing plaintext token"
    )
):
    """
    Run the OAuth authorization flow and store the token.

    Opens the provider's consent page; paste back the code or the redirect URL.
    """
    container = get_container(ctx)
    with cli_errors():
        config = container.config
        path = config.plaintext_path
        if container.store.exists(path) and not force:
            console.print(f"[yellow]⚠️ {path} already exists; use --force or `citoken rotate`[/yellow]")
            raise typer.Exit(1)

        token = container.acquirer.acquire(prompt_for_code)
        written = container.store.write(token, path)
    console.print(f"[green]✅ Token stored at[/green] {written}")


@token_app.command("show")
def show(ctx: typer.Context):
    """Show the stored token with its secrets masked."""
    container = get_container(ctx)
    with cli_errors():
        path = container.config.plaintext_path
        token = container.store.read(path)
    display_token(token, path)


@token_app.command("discard")
def discard(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Discard without confirmation"
    )
):
    """Delete the plaintext and encrypted token files."""
    container = get_container(ctx)
    if not force:
        if not typer.confirm("Delete the plaintext and encrypted token?"):
            typer.echo("Cancelled")
            return

    with cli_errors():
        removed = container.workflow_service.discard()

    if removed:
        for path in removed:
            console.print(f"  [green]✓[/green] removed {path}")
    else:
        console.print("Nothing to discard")
