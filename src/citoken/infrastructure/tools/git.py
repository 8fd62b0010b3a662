"""
Git adapter.

Branch detection and switching for the packaging filter, and the local
git config entries the CI tool caches (travis.slug).
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from citoken.infrastructure.tools.runner import CommandRunner

logger = logging.getLogger(__name__)

SLUG_CONFIG_KEY = "travis.slug"

_REMOTE_SLUG = re.compile(
    r"""
    (?:^[\w.-]+@[\w.-]+:          # git@github.com:owner/repo
      |^(?:https?|ssh|git)://[^/]+/)  # https://github.com/owner/repo
    (?P<slug>[^/\s]+/[^/\s]+?)
    (?:\.git)?/?$
    """,
    re.VERBOSE,
)


def slug_from_remote_url(url: str) -> Optional[str]:
    """Extract owner/repo from an https or ssh remote URL."""
    match = _REMOTE_SLUG.search(url.strip())
    return match.group("slug") if match else None


class GitRepository:
    """Thin wrapper over the git command line."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def current_branch(self) -> Optional[str]:
        """Current branch name, None on a detached HEAD."""
        result = self.runner.run(["git", "rev-parse", "--abbrev-ref", "HEAD"])
        branch = result.stdout.strip()
        return None if branch == "HEAD" else branch

    def branch_exists(self, name: str) -> bool:
        result = self.runner.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{name}"], check=False
        )
        return result.ok

    def checkout(self, name: str, create: bool = False) -> None:
        command = ["git", "checkout", "-b", name] if create else ["git", "checkout", name]
        self.runner.run(command)
        logger.info("Checked out branch %s", name)

    def get_config(self, key: str) -> Optional[str]:
        """Value of a local git config key, None when unset."""
        result = self.runner.run(["git", "config", "--local", "--get", key], check=False)
        value = result.stdout.strip()
        return value if result.ok and value else None

    def set_config(self, key: str, value: str) -> None:
        self.runner.run(["git", "config", "--local", key, value])
        logger.info("Set git config %s = %s", key, value)

    def remote_url(self, remote: str = "origin") -> Optional[str]:
        result = self.runner.run(["git", "remote", "get-url", remote], check=False)
        url = result.stdout.strip()
        return url if result.ok and url else None

    def remote_slug(self, remote: str = "origin") -> Optional[str]:
        url = self.remote_url(remote)
        return slug_from_remote_url(url) if url else None

    def cached_ci_slug(self) -> Optional[str]:
        return self.get_config(SLUG_CONFIG_KEY)
