"""
CLI Orchestrator - Main Entry Point

Modular CLI with decoupled command wiring. Each command group lives in
its own module under commands/.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from citoken import __version__
from citoken.application.container import Container
from citoken.infrastructure.logging_config import setup_logging
from citoken.interface.cli.commands import workflow
from citoken.interface.cli.commands.branch import branch_app
from citoken.interface.cli.commands.config import config_app
from citoken.interface.cli.commands.manifest import manifest_app
from citoken.interface.cli.commands.secret import secret_app
from citoken.interface.cli.commands.slug import slug_app
from citoken.interface.cli.commands.token import token_app

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="citoken",
    help="🔐 OAuth test-token lifecycle for CI-tested packages",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(token_app, name="token")
app.add_typer(secret_app, name="secret")
app.add_typer(manifest_app, name="manifest")
app.add_typer(branch_app, name="branch")
app.add_typer(slug_app, name="slug")
app.add_typer(config_app, name="config")

app.command("setup")(workflow.setup)
app.command("rotate")(workflow.rotate)
app.command("check")(workflow.check)


def _version_callback(value: bool):
    if value:
        typer.echo(f"citoken {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project root (defaults to the current directory)",
        file_okay=False,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="-v for info logging, -vv for debug"
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also write a debug log to this file"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit"
    ),
):
    """
    🔐 citoken - OAuth test-token lifecycle for CI-tested packages

    🎯 **Workflow:**
    1. `citoken config init --client-id ...` - describe the project
    2. `citoken setup` - acquire, store, encrypt, wire CI
    3. `citoken check` - verify ignore lists and the CI decrypt step
    4. `citoken branch switch` - exclude the token before a release submission
    5. `citoken rotate` - start over when the token is revoked or over quota
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    setup_logging(level=level, log_file=log_file)
    if not isinstance(ctx.obj, Container):
        ctx.obj = Container(project_dir=project)
