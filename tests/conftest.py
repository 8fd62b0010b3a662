"""
Shared fixtures.

FakeRunner stands in for CommandRunner: it answers git commands from an
in-memory repository state and hands travis commands to a scripted handler.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from citoken.domain.errors import ExternalToolError
from citoken.infrastructure.tools.runner import CommandResult


class FakeRunner:
    """In-memory replacement for CommandRunner."""

    def __init__(
        self,
        branch: Optional[str] = "master",
        remote_url: Optional[str] = "https://github.com/owner/pkg.git",
        git_config: Optional[Dict[str, str]] = None,
        travis: Optional[Callable[[List[str]], CommandResult]] = None,
        available: Sequence[str] = ("git", "travis"),
    ):
        self.branch = branch
        self.branches = {branch} if branch else set()
        self.remote_url = remote_url
        self.git_config = dict(git_config or {})
        self.travis = travis
        self.available = set(available)
        self.calls: List[List[str]] = []

    def is_available(self, program: str) -> bool:
        return program in self.available

    def _result(self, command, returncode=0, stdout="", stderr="") -> CommandResult:
        return CommandResult(tuple(command), returncode, stdout, stderr)

    def _git(self, command: List[str]) -> CommandResult:
        args = command[1:]
        if args[:2] == ["rev-parse", "--abbrev-ref"]:
            return self._result(command, stdout=(self.branch or "HEAD") + "\n")
        if args[:1] == ["show-ref"]:
            name = args[-1].rsplit("/", 1)[-1]
            return self._result(command, returncode=0 if name in self.branches else 1)
        if args[:1] == ["checkout"]:
            if args[1] == "-b":
                self.branches.add(args[2])
                self.branch = args[2]
            elif args[1] in self.branches:
                self.branch = args[1]
            else:
                return self._result(command, 1, stderr=f"error: pathspec '{args[1]}' did not match")
            return self._result(command)
        if args[:3] == ["config", "--local", "--get"]:
            value = self.git_config.get(args[3])
            return self._result(command, 0 if value else 1, stdout=(value or "") + "\n")
        if args[:2] == ["config", "--local"]:
            self.git_config[args[2]] = args[3]
            return self._result(command)
        if args[:2] == ["remote", "get-url"]:
            if self.remote_url is None:
                return self._result(command, 2, stderr="error: No such remote 'origin'")
            return self._result(command, stdout=self.remote_url + "\n")
        raise AssertionError(f"Unexpected git command: {command}")

    def run(self, command, check=True, input_text=None, redact=()) -> CommandResult:
        command = list(command)
        self.calls.append(command)
        if command[0] not in self.available:
            raise ExternalToolError(f"'{command[0]}' is not installed or not on PATH", command)

        if command[0] == "git":
            result = self._git(command)
        elif self.travis is not None:
            result = self.travis(command)
        else:
            raise AssertionError(f"Unexpected command: {command}")

        if check and not result.ok:
            raise ExternalToolError(
                f"'{' '.join(command)}' exited with status {result.returncode}",
                command,
                output=result.output,
                returncode=result.returncode,
            )
        return result


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Empty project root."""
    root = tmp_path / "pkg"
    root.mkdir()
    return root


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def token_payload() -> dict:
    return {
        "access_token": "ya29.a0AfH6SMBx-test-access-token",
        "token_type": "Bearer",
        "refresh_token": "1//0g-test-refresh-token",
        "expires_in": 3599,
        "scope": "https://www.googleapis.com/auth/drive openid",
    }
