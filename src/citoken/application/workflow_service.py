"""
Workflow service.

Strings the stages together: acquire -> store -> encrypt -> manifest, the
rotation that throws both files away and starts over, and the overall
consistency check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from citoken.application.encryption_service import EncryptionResult, EncryptionService
from citoken.application.manifest_service import ManifestService
from citoken.application.packaging_filter import PackagingFilter
from citoken.application.slug_doctor import SlugDoctor
from citoken.application.token_acquirer import CodePrompt, TokenAcquirer
from citoken.domain.config import BranchRole, EncryptionMode, WorkflowConfig
from citoken.domain.consistency import ConsistencyIssue, Severity
from citoken.domain.errors import ExternalToolError, SecretStoreError
from citoken.infrastructure.secrets.store import SecretStoreWriter

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Outcome of a full setup run."""

    plaintext: Path
    encryption: EncryptionResult
    manifest_changes: List[str] = field(default_factory=list)


class WorkflowService:
    """End-to-end token workflow."""

    def __init__(
        self,
        project_dir: Path,
        config: WorkflowConfig,
        acquirer: TokenAcquirer,
        store: SecretStoreWriter,
        encryption: EncryptionService,
        manifest: ManifestService,
        packaging: PackagingFilter,
        slug_doctor: SlugDoctor,
    ):
        self.project_dir = project_dir
        self.config = config
        self.acquirer = acquirer
        self.store = store
        self.encryption = encryption
        self.manifest = manifest
        self.packaging = packaging
        self.slug_doctor = slug_doctor

    def setup(self, prompt: CodePrompt, mode: Optional[EncryptionMode] = None) -> SetupResult:
        """
        Run every stage once.

        Failures propagate; the remedy for any of them is to fix the cause
        and run setup (or rotate) again.
        """
        token = self.acquirer.acquire(prompt)
        plaintext = self.store.write(token, self.config.plaintext_path)
        encryption = self.encryption.encrypt(mode=mode)
        changes = self.manifest.update(key_var=encryption.key_var, iv_var=encryption.iv_var)
        logger.info("Token workflow set up: %d manifest change(s)", len(changes))
        return SetupResult(plaintext, encryption, changes)

    def discard(self) -> List[str]:
        """Remove the plaintext and encrypted token. Returns what was removed."""
        removed = []
        for path in (self.config.plaintext_path, self.config.encrypted_path):
            if self.store.discard(path):
                removed.append(path)
        return removed

    def rotate(self, prompt: CodePrompt, mode: Optional[EncryptionMode] = None) -> SetupResult:
        """Discard both token files and redo the whole procedure."""
        removed = self.discard()
        logger.info("Rotating token; discarded %s", ", ".join(removed) or "nothing")
        return self.setup(prompt, mode=mode)

    def _branch_role(self, issues: List[ConsistencyIssue]) -> BranchRole:
        try:
            return self.packaging.current_role()
        except ExternalToolError as e:
            issues.append(ConsistencyIssue(
                "branch-unknown",
                f"Could not determine the current branch, assuming default: {e}",
                Severity.WARNING,
            ))
            return BranchRole.DEFAULT

    def manifest_check(self) -> List[ConsistencyIssue]:
        """
        Ignore list and CI configuration issues for the current branch.

        Outside a git checkout the default branch role is assumed and a
        warning is reported.
        """
        issues: List[ConsistencyIssue] = []
        role = self._branch_role(issues)
        issues.extend(self.manifest.check(role))
        issues.sort(key=lambda issue: 0 if issue.is_error else 1)
        return issues

    def check(self) -> List[ConsistencyIssue]:
        """All consistency issues of the project, errors first."""
        issues: List[ConsistencyIssue] = []

        if not self.store.exists(self.config.encrypted_path):
            issues.append(ConsistencyIssue(
                "encrypted-missing",
                f"{self.config.encrypted_path} does not exist; CI has nothing to decrypt",
            ))

        if self.store.exists(self.config.plaintext_path):
            try:
                token = self.store.read(self.config.plaintext_path)
                if token.is_expired():
                    issues.append(ConsistencyIssue(
                        "token-expired",
                        "The plaintext token has expired; rotate it",
                        Severity.WARNING,
                    ))
            except SecretStoreError as e:
                issues.append(ConsistencyIssue("token-corrupt", str(e)))

        issues.extend(self.manifest_check())

        try:
            slug = self.slug_doctor.check()
            if not slug.ok:
                issues.append(ConsistencyIssue("slug-stale", slug.error, Severity.WARNING))
        except ExternalToolError as e:
            issues.append(ConsistencyIssue("slug-unknown", str(e), Severity.WARNING))

        issues.sort(key=lambda issue: 0 if issue.is_error else 1)
        return issues
