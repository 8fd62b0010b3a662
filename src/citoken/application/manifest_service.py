"""
Build manifest updater.

Keeps the two ignore lists and the CI configuration in line with the
encrypted-file pattern. Edits are "append if missing"; running update()
twice changes nothing the second time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from citoken.domain.config import BranchRole, WorkflowConfig
from citoken.domain.consistency import (
    ConsistencyIssue,
    check_decrypt_steps,
    check_ignore_lists,
)
from citoken.infrastructure.crypto.cipher import EnvVarNames
from citoken.infrastructure.manifest.ci_config import CIConfigFile
from citoken.infrastructure.manifest.ignore_list import IgnoreList

logger = logging.getLogger(__name__)


class ManifestService:
    """Edits and checks .gitignore, .Rbuildignore and .travis.yml."""

    def __init__(self, project_dir: Path, config: WorkflowConfig):
        self.project_dir = project_dir
        self.config = config

    def vcs_ignore(self) -> IgnoreList:
        lists = self.config.ignore_lists
        return IgnoreList.load(self.project_dir / lists.vcs_file, lists.vcs_style)

    def dist_ignore(self) -> IgnoreList:
        lists = self.config.ignore_lists
        return IgnoreList.load(self.project_dir / lists.dist_file, lists.dist_style)

    def ci_config(self) -> CIConfigFile:
        return CIConfigFile.load(self.project_dir / self.config.ci.config_file)

    def current_env_vars(self) -> EnvVarNames:
        """Key/IV variable names of the existing decrypt step, else the derived ones."""
        plaintext = self.config.plaintext_path
        encrypted = self.config.encrypted_path
        for step in self.ci_config().decrypt_steps():
            if step.input_path == encrypted and step.output_path == plaintext and step.key_var and step.iv_var:
                return EnvVarNames(step.key_var, step.iv_var)
        return EnvVarNames.for_path(plaintext)

    def update(self, key_var: Optional[str] = None, iv_var: Optional[str] = None) -> List[str]:
        """
        Apply all manifest edits.

        Args:
            key_var: CI variable holding the key (defaults to the current/derived name)
            iv_var: CI variable holding the IV (defaults to the current/derived name)

        Returns:
            Human-readable list of the changes made
        """
        plaintext = self.config.plaintext_path
        encrypted = self.config.encrypted_path
        if key_var is None or iv_var is None:
            names = self.current_env_vars()
            key_var = key_var or names.key_var
            iv_var = iv_var or names.iv_var

        changes: List[str] = []

        vcs = self.vcs_ignore()
        if vcs.remove(encrypted):
            changes.append(f"removed {encrypted} from {vcs.path.name}")
        if vcs.ensure(plaintext):
            changes.append(f"added {plaintext} to {vcs.path.name}")
        if vcs.dirty:
            vcs.save()

        dist = self.dist_ignore()
        if dist.ensure(encrypted):
            changes.append(f"added {encrypted} to {dist.path.name}")
        if dist.dirty:
            dist.save()

        ci = self.ci_config()
        if ci.ensure_decrypt_step(encrypted, plaintext, key_var, iv_var, stage=self.config.ci.stage):
            ci.save()
            changes.append(f"set decrypt step in {ci.path.name} ({self.config.ci.stage})")

        for change in changes:
            logger.info("Manifest: %s", change)
        return changes

    def check(self, role: BranchRole = BranchRole.DEFAULT) -> List[ConsistencyIssue]:
        """Consistency issues of the ignore lists and CI configuration for a branch role."""
        plaintext = self.config.plaintext_path
        encrypted = self.config.encrypted_path
        issues = check_ignore_lists(plaintext, encrypted, self.vcs_ignore(), self.dist_ignore(), role)
        issues.extend(check_decrypt_steps(plaintext, encrypted, self.ci_config().decrypt_steps()))
        return issues
