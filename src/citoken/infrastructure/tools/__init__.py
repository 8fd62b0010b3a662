"""
Infrastructure Tools Package.
External command-line tools: git and the CI vendor CLI.
"""

from citoken.infrastructure.tools.git import GitRepository
from citoken.infrastructure.tools.runner import CommandResult, CommandRunner
from citoken.infrastructure.tools.travis import TravisClient

__all__ = ["CommandResult", "CommandRunner", "GitRepository", "TravisClient"]
