"""
Tests for the per-branch packaging filter.
"""

import pytest

from citoken.application.packaging_filter import PackagingFilter
from citoken.domain.config import BranchRole, WorkflowConfig
from citoken.domain.errors import ManifestError
from citoken.infrastructure.tools.git import GitRepository

from conftest import FakeRunner

ENTRY = r"^tests/testthat/token\.json$"


class TestPackagingFilter:

    def setup_method(self):
        self.config = WorkflowConfig()

    def make(self, project_dir, runner=None):
        runner = runner or FakeRunner()
        return PackagingFilter(project_dir, self.config, GitRepository(runner)), runner

    def rbuildignore(self, project_dir):
        path = project_dir / ".Rbuildignore"
        return path.read_text().splitlines() if path.exists() else []

    def test_default_branch_is_consistent_when_bundled(self, project_dir):
        packaging, _ = self.make(project_dir)
        result = packaging.status()

        assert result.ok
        assert result.value.role is BranchRole.DEFAULT
        assert not result.value.plaintext_excluded

    def test_submission_branch_needs_exclusion(self, project_dir):
        packaging, _ = self.make(project_dir, FakeRunner(branch="cran"))
        result = packaging.status()

        assert not result.ok
        assert result.recoverable
        assert result.error.role is BranchRole.SUBMISSION

    def test_apply_on_submission(self, project_dir):
        (project_dir / ".Rbuildignore").write_text("^.*\\.Rproj$\n")
        packaging, _ = self.make(project_dir, FakeRunner(branch="cran"))

        status = packaging.apply()
        assert status.plaintext_excluded
        assert status.consistent
        assert self.rbuildignore(project_dir) == [r"^.*\.Rproj$", ENTRY]

        packaging.apply()
        assert self.rbuildignore(project_dir).count(ENTRY) == 1

    def test_apply_on_default_removes_entry(self, project_dir):
        (project_dir / ".Rbuildignore").write_text(f"{ENTRY}\n^\\.travis\\.yml$\n")
        packaging, _ = self.make(project_dir)

        status = packaging.apply()
        assert not status.plaintext_excluded
        assert self.rbuildignore(project_dir) == [r"^\.travis\.yml$"]

    def test_apply_on_default_with_broader_pattern(self, project_dir):
        (project_dir / ".Rbuildignore").write_text("^tests/testthat/.*\\.json$\n")
        packaging, _ = self.make(project_dir)

        with pytest.raises(ManifestError, match=r"\.json"):
            packaging.apply()

    def test_explicit_branch_overrides_current(self, project_dir):
        packaging, _ = self.make(project_dir)
        assert packaging.apply("cran").role is BranchRole.SUBMISSION
        assert ENTRY in self.rbuildignore(project_dir)

    def test_switch_to_submission_creates_branch(self, project_dir):
        packaging, runner = self.make(project_dir)

        status = packaging.switch_to_submission()
        assert runner.branch == "cran"
        assert ["git", "checkout", "-b", "cran"] in runner.calls
        assert status.role is BranchRole.SUBMISSION
        assert status.plaintext_excluded

    def test_switch_back_to_default(self, project_dir):
        packaging, runner = self.make(project_dir)
        packaging.switch_to_submission()

        status = packaging.switch_to_default()
        assert runner.branch == "master"
        assert not status.plaintext_excluded
        assert ENTRY not in self.rbuildignore(project_dir)

    def test_switch_to_unknown_submission_branch(self, project_dir):
        packaging, runner = self.make(project_dir)
        with pytest.raises(ManifestError):
            packaging.switch_to_submission("feature")
        assert runner.branch == "master"

    def test_no_submission_branches(self, project_dir):
        self.config = WorkflowConfig(branches={"submission": []})
        packaging, _ = self.make(project_dir)
        with pytest.raises(ManifestError):
            packaging.switch_to_submission()

    def test_detached_head_counts_as_default(self, project_dir):
        packaging, _ = self.make(project_dir, FakeRunner(branch=None))
        assert packaging.current_role() is BranchRole.DEFAULT
