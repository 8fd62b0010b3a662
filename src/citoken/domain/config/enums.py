"""
Domain enums for the configuration system.

This module defines all enumeration types used in the configuration domain.
"""

from enum import Enum


class IgnoreStyle(Enum):
    """Pattern syntax of an ignore list file."""

    GLOB = "glob"    # .gitignore
    REGEX = "regex"  # .Rbuildignore (Perl regex, one per line)


class BranchRole(Enum):
    """Packaging role of a git branch."""

    DEFAULT = "default"        # plaintext token bundled
    SUBMISSION = "submission"  # plaintext token excluded from the bundle


class EncryptionMode(Enum):
    """How the encrypted artifact is produced."""

    EXTERNAL = "external"  # travis encrypt-file
    LOCAL = "local"        # cryptography + travis env set


class CIEndpoint(Enum):
    """Travis API endpoint the CLI talks to."""

    COM = "com"
    ORG = "org"
