"""
Secret Command CLI - Encrypt the token for CI and decrypt it locally.
"""

from typing import Optional

import typer
from rich.markup import escape

from citoken.domain.config import EncryptionMode
from citoken.infrastructure.crypto.cipher import KeyMaterial
from citoken.interface.cli.context import cli_errors, get_container
from citoken.interface.cli.formatters import console, display_changes

secret_app = typer.Typer(
    name="secret",
    help="🔒 Encrypt the token for CI and decrypt it locally",
    rich_markup_mode="rich",
    no_args_is_help=True
)


@secret_app.command("encrypt")
def encrypt(
    ctx: typer.Context,
    mode: Optional[EncryptionMode] = typer.Option(
        None,
        "--mode",
        "-m",
        help="external: travis encrypt-file; local: encrypt here and store keys with travis env set"
    ),
    slug: Optional[str] = typer.Option(
        None,
        "--repo",
        "-r",
        help="Repository slug (owner/repo) registered with the CI provider"
    ),
    skip_manifest: bool = typer.Option(
        False,
        "--skip-manifest",
        help="Do not update the ignore lists and CI configuration"
    )
):
    """
    Encrypt the plaintext token and register the decryption keys with CI.

    Also adds the decrypt step to the CI configuration unless --skip-manifest.
    """
    container = get_container(ctx)
    with cli_errors():
        result = container.encryption_service.encrypt(mode=mode, slug=slug)
        console.print(f"[green]✅ Encrypted to[/green] {result.encrypted}")
        console.print(f"   CI variables: [bold]{result.key_var}[/bold], [bold]{result.iv_var}[/bold]")
        if not skip_manifest:
            display_changes(container.manifest_service.update(result.key_var, result.iv_var))


@secret_app.command("decrypt")
def decrypt(
    ctx: typer.Context,
    key: Optional[str] = typer.Option(
        None,
        "--key",
        "-K",
        help="Key as hex; defaults to the CI environment variable"
    ),
    iv: Optional[str] = typer.Option(
        None,
        "--iv",
        help="IV as hex; defaults to the CI environment variable"
    ),
    output: Optional[str] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write somewhere other than the plaintext path"
    )
):
    """
    Decrypt the encrypted token, as the CI step does.

    Without --key/--iv the values are read from the encrypted_<id>_key and
    encrypted_<id>_iv environment variables.
    """
    container = get_container(ctx)
    with cli_errors():
        service = container.encryption_service
        if key or iv:
            if not (key and iv):
                console.print("[red]❌ --key and --iv must be given together[/red]")
                raise typer.Exit(1)
            try:
                material = KeyMaterial(key, iv)
            except ValueError as e:
                console.print(f"[red]❌ Error:[/red] {escape(str(e))}")
                raise typer.Exit(1) from e
            path = service.decrypt(material, output=output)
        else:
            names = container.manifest_service.current_env_vars()
            path = service.decrypt_from_env(key_var=names.key_var, iv_var=names.iv_var, output=output)
    console.print(f"[green]✅ Decrypted to[/green] {path}")
