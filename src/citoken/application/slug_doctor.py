"""
Repository slug doctor.

The CI tool caches the repository slug in .git/config. After a rename or
transfer the cached value no longer matches the CI-side registration and
encryption is refused. This service spots the stale value and rewrites it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from citoken.domain.errors import ConfigError
from citoken.domain.results import Failure, Result, Success
from citoken.infrastructure.tools.git import SLUG_CONFIG_KEY, GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlugReport:
    """The slug as seen by each source."""

    cached: Optional[str]
    remote: Optional[str]
    configured: Optional[str]

    @property
    def expected(self) -> Optional[str]:
        return self.configured or self.remote


class SlugDoctor:
    """Checks and fixes the cached CI repository slug."""

    def __init__(self, git: GitRepository, configured_slug: Optional[str] = None):
        self.git = git
        self.configured_slug = configured_slug

    def report(self) -> SlugReport:
        return SlugReport(
            cached=self.git.cached_ci_slug(),
            remote=self.git.remote_slug(),
            configured=self.configured_slug,
        )

    def check(self) -> Result[str, str]:
        """
        Success(slug) when the cached slug agrees with the expected one.

        No cached slug is fine: the CI tool derives it from the remote.
        """
        report = self.report()
        expected = report.expected

        if expected is None:
            return Failure("Cannot determine the repository slug: no origin remote and no ci.repo_slug")

        if report.cached is None or report.cached.lower() == expected.lower():
            return Success(expected, metadata={"cached": report.cached, "remote": report.remote})

        logger.warning("Cached %s is %s, expected %s", SLUG_CONFIG_KEY, report.cached, expected)
        return Failure(
            f"Cached {SLUG_CONFIG_KEY} '{report.cached}' does not match '{expected}'",
            context={"cached": report.cached, "expected": expected},
            recoverable=True,
        )

    def fix(self, slug: Optional[str] = None) -> str:
        """
        Rewrite the cached slug.

        Raises:
            ConfigError: If no slug is given and none can be derived
        """
        slug = slug or self.report().expected
        if not slug:
            raise ConfigError("No slug given and none can be derived from the origin remote")
        self.git.set_config(SLUG_CONFIG_KEY, slug)
        return slug
