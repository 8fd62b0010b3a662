"""
Config Command CLI - Project configuration management.
"""

from typing import List, Optional

import typer
from rich.markup import escape

from citoken.interface.cli.context import cli_errors, get_container
from citoken.interface.cli.formatters import console, display_config

config_app = typer.Typer(
    name="config",
    help="⚙️ Configuration validation and management",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@config_app.command("init")
def init(
    ctx: typer.Context,
    client_id: Optional[str] = typer.Option(None, "--client-id", help="OAuth client id"),
    scope: Optional[List[str]] = typer.Option(None, "--scope", help="Scope to request (repeatable)"),
    plaintext: Optional[str] = typer.Option(None, "--token-path", help="Plaintext token path"),
    slug: Optional[str] = typer.Option(None, "--repo", help="Repository slug owner/repo"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file")
):
    """Write citoken.json with the defaults and the given settings."""
    container = get_container(ctx)
    overrides = {}
    oauth = {}
    if client_id:
        oauth["client_id"] = client_id
    if scope:
        oauth["scopes"] = list(scope)
    if oauth:
        overrides["oauth"] = oauth
    if plaintext:
        overrides["artifacts"] = {"plaintext": plaintext}
    if slug:
        overrides["ci"] = {"repo_slug": slug}

    with cli_errors():
        try:
            path = container.config_manager.init_config(overwrite=force, **overrides)
        except ValueError as e:
            console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from e
    console.print(f"[green]✅ Wrote[/green] {path}")


@config_app.command("validate")
def validate(
    ctx: typer.Context,
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Also require the OAuth client settings needed to acquire a token"
    )
):
    """Validate the configuration file."""
    container = get_container(ctx)
    errors = container.config_manager.validate_config(require_client=strict)
    if not errors:
        mode = "strict " if strict else ""
        console.print(f"[green]✅ All {mode}configuration checks passed![/green]")
        return

    console.print(f"[red]❌ Configuration validation failed with {len(errors)} error(s):[/red]")
    for i, error in enumerate(errors, 1):
        console.print(f"  {i}. {error}")
    raise typer.Exit(1)


@config_app.command("show")
def show(ctx: typer.Context):
    """Show the effective configuration."""
    container = get_container(ctx)
    with cli_errors():
        config = container.config
    display_config(config)
