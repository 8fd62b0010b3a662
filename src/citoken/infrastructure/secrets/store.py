"""
Secret store for the plaintext token fixture.

Writes the token as JSON at its conventional, project-relative path.
Single writer, manual operation: no locking or atomic replace.
"""

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path

from pydantic import ValidationError

from citoken.domain.errors import SecretStoreError
from citoken.domain.token import OAuthToken

logger = logging.getLogger(__name__)


class SecretStoreWriter:
    """Persists and reads back the plaintext token file."""

    def __init__(self, project_dir: Path):
        self.project_dir = project_dir

    def resolve(self, path: str | Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.project_dir / path

    def write(self, token: OAuthToken, path: str | Path) -> Path:
        """
        Serialize the token to disk.

        Filesystem errors propagate untouched.
        """
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(token.to_storage_dict(), indent=2) + "\n", encoding="utf-8")

        if os.name == "posix":
            target.chmod(stat.S_IRUSR | stat.S_IWUSR)

        logger.info("Wrote plaintext token to %s", target)
        return target

    def read(self, path: str | Path) -> OAuthToken:
        """
        Load the token.

        Raises:
            FileNotFoundError: If the file does not exist
            SecretStoreError: If the content is not a valid token
        """
        target = self.resolve(path)
        raw = target.read_text(encoding="utf-8")
        try:
            return OAuthToken(**json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.error("Stored token at %s is corrupt: %s", target, type(e).__name__)
            raise SecretStoreError(f"Stored token at {target} cannot be read: {e}") from e

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).is_file()

    def discard(self, path: str | Path) -> bool:
        """Remove the file if present. Returns whether something was removed."""
        target = self.resolve(path)
        if not target.exists():
            return False
        target.unlink()
        logger.info("Discarded %s", target)
        return True
