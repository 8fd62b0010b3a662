"""
External command runner.

Every external tool (git, the CI vendor CLI) goes through CommandRunner
so tests can substitute a fake.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from citoken.domain.errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class CommandRunner:
    """Runs commands with subprocess in a fixed working directory."""

    def __init__(self, cwd: Path, timeout: int = 120):
        self.cwd = cwd
        self.timeout = timeout

    def is_available(self, program: str) -> bool:
        return shutil.which(program) is not None

    def run(
        self,
        command: Sequence[str],
        check: bool = True,
        input_text: str | None = None,
        redact: Sequence[str] = (),
    ) -> CommandResult:
        """
        Run a command and capture its output.

        Args:
            command: Program and arguments
            check: Raise ExternalToolError on a non-zero exit
            input_text: Text passed on stdin
            redact: Argument values to mask in logs and errors

        Raises:
            ExternalToolError: If the program is missing, times out, or fails with check=True
        """
        shown = [("***" if arg in redact else arg) for arg in command]
        logger.debug("Running: %s", " ".join(shown))

        try:
            proc = subprocess.run(
                list(command),
                cwd=str(self.cwd),
                input=input_text,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"'{command[0]}' is not installed or not on PATH", shown) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                f"'{command[0]}' did not finish within {self.timeout}s", shown
            ) from e

        result = CommandResult(tuple(shown), proc.returncode, proc.stdout or "", proc.stderr or "")
        if check and not result.ok:
            logger.error("Command failed (%s): %s", result.returncode, " ".join(shown))
            raise ExternalToolError(
                f"'{' '.join(shown)}' exited with status {result.returncode}: {result.output}",
                shown,
                output=result.output,
                returncode=result.returncode,
            )
        return result
