"""
Exception hierarchy for citoken.

Every failure the CLI reports to the maintainer derives from CitokenError.
Filesystem errors from the secret store are allowed through untouched.
"""

from __future__ import annotations

from typing import Sequence


class CitokenError(Exception):
    """Base class for all citoken errors."""


class ConfigError(CitokenError):
    """Project configuration is missing, unreadable or invalid."""


class AuthorizationError(CitokenError):
    """The OAuth authorization exchange failed."""


class SecretStoreError(CitokenError):
    """A stored token file could not be decoded."""


class ManifestError(CitokenError):
    """An ignore list or the CI configuration could not be edited."""


class TokenUnavailableError(CitokenError):
    """No plaintext token is available for the test suite."""


class ExternalToolError(CitokenError):
    """An external command is missing or exited with an error."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] | None = None,
        output: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.command = list(command or [])
        self.output = output
        self.returncode = returncode


class SlugMismatchError(ExternalToolError):
    """The CI tool rejected the repository slug cached in the local git config."""

    def __init__(
        self,
        message: str,
        remedy: str,
        command: Sequence[str] | None = None,
        output: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message, command=command, output=output, returncode=returncode)
        self.remedy = remedy

    def __str__(self) -> str:
        return f"{super().__str__()}\n{self.remedy}"
