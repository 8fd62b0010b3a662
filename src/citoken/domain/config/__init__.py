"""
Configuration domain package.

This package contains the domain layer for configuration management.
"""

from .enums import BranchRole, CIEndpoint, EncryptionMode, IgnoreStyle
from .workflow_config import (
    CLIENT_SECRET_ENV,
    ArtifactPaths,
    BranchSettings,
    CISettings,
    IgnoreListSettings,
    OAuthClientSettings,
    WorkflowConfig,
)

__all__ = [
    "CLIENT_SECRET_ENV",
    "ArtifactPaths",
    "BranchRole",
    "BranchSettings",
    "CIEndpoint",
    "CISettings",
    "EncryptionMode",
    "IgnoreListSettings",
    "IgnoreStyle",
    "OAuthClientSettings",
    "WorkflowConfig",
]
