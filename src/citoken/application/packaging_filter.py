"""
Conditional packaging filter.

Two states per branch: the default branch bundles the plaintext token
with the package so local checks run the token tests, a submission
branch lists it in the distribution ignore list so the archive never
ships it. Switching is always started by the maintainer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from citoken.domain.config import BranchRole, WorkflowConfig
from citoken.domain.consistency import role_for_branch
from citoken.domain.errors import ManifestError
from citoken.domain.results import Failure, Result, Success
from citoken.infrastructure.manifest.ignore_list import IgnoreList
from citoken.infrastructure.tools.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackagingStatus:
    """Packaging state of one branch."""

    branch: Optional[str]
    role: BranchRole
    plaintext_excluded: bool

    @property
    def consistent(self) -> bool:
        return self.plaintext_excluded == (self.role is BranchRole.SUBMISSION)


class PackagingFilter:
    """Keeps the distribution ignore list in step with the branch role."""

    def __init__(self, project_dir: Path, config: WorkflowConfig, git: GitRepository):
        self.project_dir = project_dir
        self.config = config
        self.git = git

    def _dist_ignore(self) -> IgnoreList:
        lists = self.config.ignore_lists
        return IgnoreList.load(self.project_dir / lists.dist_file, lists.dist_style)

    def role_for(self, branch: Optional[str]) -> BranchRole:
        return role_for_branch(branch, self.config.branches.submission)

    def current_role(self) -> BranchRole:
        return self.role_for(self.git.current_branch())

    def status(self, branch: Optional[str] = None) -> Result[PackagingStatus, PackagingStatus]:
        """Success when the distribution ignore list matches the branch role."""
        branch = branch if branch is not None else self.git.current_branch()
        status = PackagingStatus(
            branch=branch,
            role=self.role_for(branch),
            plaintext_excluded=self._dist_ignore().contains(self.config.plaintext_path),
        )
        if status.consistent:
            return Success(status)
        return Failure(status, recoverable=True)

    def apply(self, branch: Optional[str] = None) -> PackagingStatus:
        """
        Edit the distribution ignore list for the role of a branch.

        Raises:
            ManifestError: If a broader pattern keeps the plaintext excluded
                on a default branch
        """
        branch = branch if branch is not None else self.git.current_branch()
        role = self.role_for(branch)
        plaintext = self.config.plaintext_path
        dist = self._dist_ignore()

        if role is BranchRole.SUBMISSION:
            dist.ensure(plaintext)
        else:
            dist.remove(plaintext)
            if dist.contains(plaintext):
                raise ManifestError(
                    f"{plaintext} is still excluded by {dist.path.name} entries: "
                    f"{', '.join(dist.matching_entries(plaintext))}"
                )

        if dist.dirty:
            dist.save()
            logger.info("Packaging filter set to %s for branch %s", role.value, branch)

        return PackagingStatus(branch, role, dist.contains(plaintext))

    def switch_to_submission(self, name: Optional[str] = None) -> PackagingStatus:
        """
        Check out a submission branch (created if needed) and apply its filter.

        Raises:
            ManifestError: If the name is not a configured submission branch
        """
        if name is None:
            if not self.config.branches.submission:
                raise ManifestError("No submission branches are configured")
            name = self.config.branches.submission[0]
        if self.role_for(name) is not BranchRole.SUBMISSION:
            raise ManifestError(
                f"'{name}' is not a submission branch; configured: {', '.join(self.config.branches.submission)}"
            )
        self.git.checkout(name, create=not self.git.branch_exists(name))
        return self.apply(name)

    def switch_to_default(self) -> PackagingStatus:
        """Check out the default branch and apply its filter."""
        name = self.config.branches.default
        self.git.checkout(name)
        return self.apply(name)
