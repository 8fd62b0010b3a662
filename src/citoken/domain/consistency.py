"""
Consistency rules for the encrypted-file CI pattern.

This module provides THE authoritative checks that the plaintext token,
the encrypted token, the two ignore lists and the CI decrypt step agree
with each other.

Architecture Note:
    - Pure domain logic - no I/O
    - Ignore lists are passed in through the IgnoreMatcher protocol
    - CI decrypt steps are passed in already parsed
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol

from citoken.domain.config.enums import BranchRole


# =============================================================================
# Protocols (Interfaces)
# =============================================================================

class IgnoreMatcher(Protocol):
    """Protocol for anything that can tell whether it excludes a path."""

    def contains(self, path: str) -> bool:
        """Check if an entry of the list matches the path."""
        ...


# =============================================================================
# Decrypt step
# =============================================================================

@dataclass(frozen=True)
class DecryptStep:
    """An `openssl aes-256-cbc ... -d` command found in the CI configuration."""

    input_path: str
    output_path: str
    key_var: str
    iv_var: str
    command: str


def format_decrypt_command(encrypted: str, plaintext: str, key_var: str, iv_var: str) -> str:
    """Build the CI-side decrypt command for the given artifact pair."""
    return (
        f"openssl aes-256-cbc -K ${key_var} -iv ${iv_var} "
        f"-in {shlex.quote(encrypted)} -out {shlex.quote(plaintext)} -d"
    )


def parse_decrypt_command(command: str) -> Optional[DecryptStep]:
    """
    Parse an openssl decrypt command.

    Returns None for anything that is not an aes-256-cbc decryption with
    -in and -out arguments.
    """
    try:
        tokens = shlex.split(command)
    except ValueError:
        return None

    if len(tokens) < 2 or tokens[0] != "openssl" or tokens[1] != "aes-256-cbc":
        return None
    if "-d" not in tokens:
        return None

    args = {}
    for flag in ("-K", "-iv", "-in", "-out"):
        if flag in tokens:
            idx = tokens.index(flag)
            if idx + 1 < len(tokens):
                args[flag] = tokens[idx + 1]

    if "-in" not in args or "-out" not in args:
        return None

    return DecryptStep(
        input_path=_normalize(args["-in"]),
        output_path=_normalize(args["-out"]),
        key_var=args.get("-K", "").lstrip("$").strip("{}"),
        iv_var=args.get("-iv", "").lstrip("$").strip("{}"),
        command=command,
    )


def _normalize(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


# =============================================================================
# Issues
# =============================================================================

class Severity(Enum):
    """How bad a consistency violation is."""

    ERROR = "error"      # leaks the secret or breaks CI
    WARNING = "warning"  # works, but needs attention


@dataclass(frozen=True)
class ConsistencyIssue:
    """A single violated rule."""

    code: str
    message: str
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


# =============================================================================
# Rules
# =============================================================================

def check_ignore_lists(
    plaintext: str,
    encrypted: str,
    vcs: IgnoreMatcher,
    dist: IgnoreMatcher,
    role: BranchRole = BranchRole.DEFAULT,
) -> List[ConsistencyIssue]:
    """
    Check the artifact split across the two ignore lists.

    The plaintext must be excluded from version control and the encrypted
    file from the package bundle. Neither may sit in both lists, except
    that a submission branch also drops the plaintext from the bundle.
    """
    issues: List[ConsistencyIssue] = []

    if not vcs.contains(plaintext):
        issues.append(ConsistencyIssue(
            "plaintext-tracked",
            f"{plaintext} is not in the version-control ignore list; the token would be committed",
        ))
    if vcs.contains(encrypted):
        issues.append(ConsistencyIssue(
            "encrypted-ignored",
            f"{encrypted} is in the version-control ignore list; CI will have nothing to decrypt",
        ))
    if not dist.contains(encrypted):
        issues.append(ConsistencyIssue(
            "encrypted-bundled",
            f"{encrypted} is not in the distribution ignore list; it would ship in the package",
        ))

    plaintext_excluded = dist.contains(plaintext)
    if role is BranchRole.SUBMISSION and not plaintext_excluded:
        issues.append(ConsistencyIssue(
            "plaintext-bundled-on-submission",
            f"{plaintext} must be in the distribution ignore list on a submission branch",
        ))
    elif role is BranchRole.DEFAULT and plaintext_excluded:
        issues.append(ConsistencyIssue(
            "plaintext-excluded-on-default",
            f"{plaintext} is in the distribution ignore list on the default branch; "
            "local package checks will skip token tests",
        ))

    return issues


def check_decrypt_steps(
    plaintext: str,
    encrypted: str,
    steps: Iterable[DecryptStep],
) -> List[ConsistencyIssue]:
    """The CI configuration must hold exactly one decrypt step from encrypted to plaintext."""
    steps = list(steps)
    matching = [s for s in steps if s.input_path == encrypted and s.output_path == plaintext]
    issues: List[ConsistencyIssue] = []

    if not matching:
        issues.append(ConsistencyIssue(
            "decrypt-step-missing",
            f"CI configuration has no decrypt step from {encrypted} to {plaintext}",
        ))
    elif len(matching) > 1:
        issues.append(ConsistencyIssue(
            "decrypt-step-duplicated",
            f"CI configuration decrypts {encrypted} {len(matching)} times",
        ))

    for step in matching:
        if not step.key_var or not step.iv_var:
            issues.append(ConsistencyIssue(
                "decrypt-step-keys",
                f"Decrypt step is missing its key/iv variables: {step.command}",
            ))

    stale = [s for s in steps if s.output_path == plaintext and s.input_path != encrypted]
    for step in stale:
        issues.append(ConsistencyIssue(
            "decrypt-step-stale",
            f"Decrypt step writes {plaintext} from unexpected input {step.input_path}",
        ))

    return issues


def role_for_branch(branch: str | None, submission_branches: Iterable[str]) -> BranchRole:
    """Packaging role of a branch. Unknown and detached HEAD count as default."""
    if branch and branch in set(submission_branches):
        return BranchRole.SUBMISSION
    return BranchRole.DEFAULT
