"""
Travis CI command-line client.

Wraps `travis encrypt-file` and `travis env set`. Output of the vendor tool
is parsed for the decrypt command it prints, and failures caused by a stale
repository slug are classified so the maintainer gets the remedy.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from citoken.domain.config.enums import CIEndpoint
from citoken.domain.consistency import DecryptStep, parse_decrypt_command
from citoken.domain.errors import ExternalToolError, SlugMismatchError
from citoken.infrastructure.tools.git import SLUG_CONFIG_KEY
from citoken.infrastructure.tools.runner import CommandRunner

logger = logging.getLogger(__name__)

_OPENSSL_LINE = re.compile(r"^\s*(openssl aes-256-cbc .*-d)\s*$", re.MULTILINE)

_SLUG_ERRORS = (
    re.compile(r"repository not known", re.IGNORECASE),
    re.compile(r"could not find repository", re.IGNORECASE),
    re.compile(r"resource not found", re.IGNORECASE),
    re.compile(r"not allowed to", re.IGNORECASE),
    re.compile(r"repository .* not found", re.IGNORECASE),
)


def slug_remedy(slug: Optional[str]) -> str:
    target = slug or "<owner>/<repo>"
    return (
        f"The CI tool rejected the repository slug cached in .git/config ({SLUG_CONFIG_KEY}). "
        f"Run `citoken slug fix` or `git config {SLUG_CONFIG_KEY} {target}` and retry."
    )


def is_slug_error(output: str) -> bool:
    return any(pattern.search(output) for pattern in _SLUG_ERRORS)


@dataclass(frozen=True)
class EncryptFileOutput:
    """What `travis encrypt-file` reported."""

    decrypt_step: DecryptStep
    raw_output: str


class TravisClient:
    """Client for the travis CLI."""

    def __init__(
        self,
        runner: CommandRunner,
        program: str = "travis",
        endpoint: CIEndpoint = CIEndpoint.COM,
    ):
        self.runner = runner
        self.program = program
        self.endpoint = endpoint

    def _base(self, *args: str, slug: Optional[str] = None) -> List[str]:
        command = [self.program, *args, f"--{self.endpoint.value}", "--no-interactive"]
        if slug:
            command.extend(["--repo", slug])
        return command

    def is_available(self) -> bool:
        return self.runner.is_available(self.program)

    def _run(self, command: List[str], slug: Optional[str], redact=()) -> str:
        try:
            return self.runner.run(command, redact=redact).output
        except ExternalToolError as e:
            if e.output and is_slug_error(e.output):
                logger.error("CI tool rejected slug %s", slug or "(cached)")
                raise SlugMismatchError(
                    f"'{self.program}' rejected the repository slug",
                    remedy=slug_remedy(slug),
                    command=e.command,
                    output=e.output,
                    returncode=e.returncode,
                ) from e
            raise

    def encrypt_file(self, plaintext: str, encrypted: str, slug: Optional[str] = None) -> EncryptFileOutput:
        """
        Encrypt a file and register its key/IV with the CI provider.

        Raises:
            SlugMismatchError: If the CI side does not know the cached slug
            ExternalToolError: For any other failure, or if no decrypt
                command could be found in the output
        """
        command = self._base("encrypt-file", plaintext, encrypted, "--force", slug=slug)
        output = self._run(command, slug)

        match = _OPENSSL_LINE.search(output)
        step = parse_decrypt_command(match.group(1)) if match else None
        if step is None:
            raise ExternalToolError(
                f"Could not find the decrypt command in '{self.program} encrypt-file' output",
                command,
                output=output,
            )

        # The tool echoes paths as given on its command line
        step = DecryptStep(
            input_path=encrypted,
            output_path=plaintext,
            key_var=step.key_var,
            iv_var=step.iv_var,
            command=step.command,
        )
        logger.info("Registered %s/%s with the CI provider", step.key_var, step.iv_var)
        return EncryptFileOutput(step, output)

    def set_env(self, name: str, value: str, slug: Optional[str] = None) -> None:
        """Store a private environment variable in the CI repository settings."""
        command = self._base("env", "set", name, value, "--private", slug=slug)
        self._run(command, slug, redact=(value,))
        logger.info("Stored CI environment variable %s", name)
