"""
Slug Command CLI - Detect and fix a stale cached repository slug.
"""

from typing import Optional

import typer

from citoken.infrastructure.tools.git import SLUG_CONFIG_KEY
from citoken.interface.cli.context import cli_errors, get_container
from citoken.interface.cli.formatters import console

slug_app = typer.Typer(
    name="slug",
    help="🏷️ Check the repository slug cached for the CI tool",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@slug_app.command("check")
def check(ctx: typer.Context):
    """Compare the cached slug with the origin remote and the configured slug."""
    container = get_container(ctx)
    with cli_errors():
        result = container.slug_doctor.check()
    if result.ok:
        console.print(f"[green]✅ Repository slug:[/green] {result.value}")
        return
    console.print(f"[red]❌ {result.error}[/red]")
    if result.recoverable:
        console.print("[yellow]💡 Run `citoken slug fix` to rewrite it[/yellow]")
    raise typer.Exit(1)


@slug_app.command("fix")
def fix(
    ctx: typer.Context,
    slug: Optional[str] = typer.Argument(None, help="owner/repo (defaults to the configured or origin slug)")
):
    """Rewrite the cached slug in the local git config."""
    container = get_container(ctx)
    with cli_errors():
        written = container.slug_doctor.fix(slug)
    console.print(f"[green]✅ {SLUG_CONFIG_KEY} set to[/green] {written}")
