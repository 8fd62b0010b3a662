"""
Token access for the package's own test suite.

    from citoken.testing import load_test_token, token_available

    @pytest.mark.skipif(not token_available(), reason="no OAuth token")
    def test_api_call():
        token = load_test_token()

Locally the plaintext token is read straight from the fixture path; on CI
it exists once the decrypt step has run.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from citoken.domain.errors import SecretStoreError, TokenUnavailableError
from citoken.domain.token import OAuthToken
from citoken.infrastructure.config.repository import ConfigRepository
from citoken.infrastructure.secrets.store import SecretStoreWriter

TOKEN_PATH_ENV = "CITOKEN_TOKEN_PATH"


def _resolve(path: Optional[str | Path], project_dir: Optional[Path]) -> Path:
    project_dir = project_dir or Path.cwd()
    if path is None:
        path = os.environ.get(TOKEN_PATH_ENV)
    if path is None:
        path = ConfigRepository(project_dir).load_workflow_config().plaintext_path
    path = Path(path)
    return path if path.is_absolute() else project_dir / path


def token_available(path: Optional[str | Path] = None, project_dir: Optional[Path] = None) -> bool:
    """Whether a plaintext token file is present."""
    return _resolve(path, project_dir).is_file()


def load_test_token(path: Optional[str | Path] = None, project_dir: Optional[Path] = None) -> OAuthToken:
    """
    Load the plaintext token for a test run.

    Args:
        path: Token file; defaults to $CITOKEN_TOKEN_PATH, then the configured plaintext path
        project_dir: Project root, defaults to the current directory

    Raises:
        TokenUnavailableError: If the token file is missing or unreadable
    """
    target = _resolve(path, project_dir)
    try:
        return SecretStoreWriter(target.parent).read(target)
    except FileNotFoundError as e:
        raise TokenUnavailableError(f"No OAuth token at {target}") from e
    except SecretStoreError as e:
        raise TokenUnavailableError(str(e)) from e
