"""
Result formatters for CLI commands.

Provides formatting and display logic for command results.
"""

from typing import Iterable, List

from rich.console import Console
from rich.table import Table

from citoken.application.packaging_filter import PackagingStatus
from citoken.application.workflow_service import SetupResult
from citoken.domain.config import BranchRole, WorkflowConfig
from citoken.domain.consistency import ConsistencyIssue
from citoken.domain.token import OAuthToken

console = Console()


def display_issues(issues: List[ConsistencyIssue]) -> None:
    """Display consistency check results."""
    if not issues:
        console.print("[green]✅ Token workflow is consistent[/green]")
        return

    errors = sum(1 for issue in issues if issue.is_error)
    warnings = len(issues) - errors

    table = Table(title="Consistency issues", show_lines=False)
    table.add_column("Severity")
    table.add_column("Code", style="dim")
    table.add_column("Message")
    for issue in issues:
        severity = "[red]error[/red]" if issue.is_error else "[yellow]warning[/yellow]"
        table.add_row(severity, issue.code, issue.message)
    console.print(table)

    if errors:
        console.print(f"[red]❌ {errors} error(s), {warnings} warning(s)[/red]")
    else:
        console.print(f"[yellow]⚠️ {warnings} warning(s)[/yellow]")


def display_changes(changes: Iterable[str]) -> None:
    changes = list(changes)
    if not changes:
        console.print("[green]✓[/green] Nothing to change")
        return
    for change in changes:
        console.print(f"  [green]✓[/green] {change}")


def display_token(token: OAuthToken, path: str) -> None:
    """Token summary with the secret masked."""
    secret = token.access_token.get_secret_value()
    table = Table(show_header=False, box=None)
    table.add_row("File", path)
    table.add_row("Type", token.token_type)
    table.add_row("Access token", f"{secret[:4]}…{secret[-4:]}" if len(secret) > 12 else "***")
    table.add_row("Refresh token", "yes" if token.refresh_token else "no")
    table.add_row("Scopes", ", ".join(token.scopes) or "-")
    table.add_row("Obtained", token.obtained_at.isoformat(timespec="seconds"))
    if token.expires_at is None:
        table.add_row("Expires", "never")
    else:
        expired = " [red](expired)[/red]" if token.is_expired() else ""
        table.add_row("Expires", f"{token.expires_at.isoformat(timespec='seconds')}{expired}")
    console.print(table)


def display_packaging_status(status: PackagingStatus) -> None:
    bundled = "excluded from" if status.plaintext_excluded else "bundled in"
    role = "submission" if status.role is BranchRole.SUBMISSION else "default"
    branch = status.branch or "(detached HEAD)"
    mark = "[green]✓[/green]" if status.consistent else "[red]✗[/red]"
    console.print(f"{mark} Branch [bold]{branch}[/bold] ({role}): plaintext token {bundled} the package")


def display_setup(result: SetupResult) -> None:
    enc = result.encryption
    console.print(f"[green]✅ Token stored at[/green] {enc.plaintext}")
    console.print(f"[green]✅ Encrypted to[/green] {enc.encrypted} ({enc.mode.value})")
    console.print(f"   CI variables: [bold]{enc.key_var}[/bold], [bold]{enc.iv_var}[/bold]")
    display_changes(result.manifest_changes)
    console.print(f"\n[yellow]💡 Commit {enc.encrypted} and the edited files; never commit {enc.plaintext}[/yellow]")


def display_config(config: WorkflowConfig) -> None:
    table = Table(title="citoken configuration", show_header=False)
    table.add_row("Plaintext token", config.plaintext_path)
    table.add_row("Encrypted token", config.encrypted_path)
    table.add_row("VCS ignore list", f"{config.ignore_lists.vcs_file} ({config.ignore_lists.vcs_style.value})")
    table.add_row("Dist ignore list", f"{config.ignore_lists.dist_file} ({config.ignore_lists.dist_style.value})")
    table.add_row("CI config", f"{config.ci.config_file} [{config.ci.stage}]")
    table.add_row("CI tool", f"{config.ci.cli} --{config.ci.endpoint.value} ({config.ci.encryption_mode.value})")
    table.add_row("Repository slug", config.ci.repo_slug or "(from origin remote)")
    table.add_row("Default branch", config.branches.default)
    table.add_row("Submission branches", ", ".join(config.branches.submission) or "-")
    table.add_row("OAuth client", config.oauth.client_id or "[red](not set)[/red]")
    table.add_row("Scopes", ", ".join(config.oauth.scopes) or "-")
    console.print(table)
