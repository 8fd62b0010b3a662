"""
Workflow configuration domain model.

This module defines the WorkflowConfig domain entity with every path,
file name and provider setting the token workflow uses. All fields have
defaults so a project without a config file still works.
"""

import os
from pathlib import PurePosixPath
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .enums import CIEndpoint, EncryptionMode, IgnoreStyle

CLIENT_SECRET_ENV = "CITOKEN_CLIENT_SECRET"
CI_STAGES = ("before_install", "install", "before_script", "script")


def _relative_posix(v: str) -> str:
    path = PurePosixPath(v.replace("\\", "/"))
    if path.is_absolute():
        raise ValueError(f"Path must be relative to the project root: {v}")
    return str(path)


class OAuthClientSettings(BaseModel):
    """OAuth2 client registration used by the token acquirer."""

    authorize_url: str = Field(
        default="https://accounts.google.com/o/oauth2/auth",
        description="Provider authorization endpoint"
    )
    token_url: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="Provider token endpoint"
    )
    client_id: str = Field(default="", description="OAuth client id")
    client_secret: Optional[SecretStr] = Field(default=None, description="OAuth client secret")
    redirect_uri: str = Field(
        default="urn:ietf:wg:oauth:2.0:oob",
        description="Redirect URI registered for the client"
    )
    scopes: List[str] = Field(default_factory=list, description="Scopes to request")
    timeout: float = Field(default=30.0, ge=1, le=300, description="HTTP timeout in seconds")

    def resolved_client_secret(self) -> Optional[str]:
        """Client secret from config, falling back to the environment."""
        if self.client_secret is not None:
            return self.client_secret.get_secret_value()  # pylint: disable=no-member
        return os.environ.get(CLIENT_SECRET_ENV)


class ArtifactPaths(BaseModel):
    """Project-relative locations of the plaintext and encrypted token."""

    plaintext: str = Field(
        default="tests/testthat/token.json",
        description="Plaintext token fixture, excluded from version control"
    )
    encrypted: Optional[str] = Field(
        default=None,
        description="Encrypted token, committed. Defaults to plaintext + '.enc'"
    )

    @field_validator('plaintext')
    @classmethod
    def validate_plaintext(cls, v: str) -> str:
        """Validate plaintext path is relative."""
        if not v or not v.strip():
            raise ValueError("Plaintext path cannot be empty")
        return _relative_posix(v.strip())

    @field_validator('encrypted')
    @classmethod
    def validate_encrypted(cls, v: Optional[str]) -> Optional[str]:
        """Validate encrypted path is relative."""
        if v is None or not v.strip():
            return None
        return _relative_posix(v.strip())

    @property
    def encrypted_path(self) -> str:
        return self.encrypted or f"{self.plaintext}.enc"


class IgnoreListSettings(BaseModel):
    """The two ignore lists the artifacts must be split across."""

    vcs_file: str = Field(default=".gitignore", description="Version-control ignore list")
    vcs_style: IgnoreStyle = Field(default=IgnoreStyle.GLOB)
    dist_file: str = Field(default=".Rbuildignore", description="Package-distribution ignore list")
    dist_style: IgnoreStyle = Field(default=IgnoreStyle.REGEX)


class CISettings(BaseModel):
    """CI provider settings."""

    config_file: str = Field(default=".travis.yml", description="CI configuration file")
    stage: str = Field(default="before_install", description="Stage that receives the decrypt step")
    cli: str = Field(default="travis", description="CI vendor command-line tool")
    endpoint: CIEndpoint = Field(default=CIEndpoint.COM)
    repo_slug: Optional[str] = Field(default=None, description="owner/repo registered with the CI provider")
    encryption_mode: EncryptionMode = Field(default=EncryptionMode.EXTERNAL)
    command_timeout: int = Field(default=120, ge=5, le=900)

    @field_validator('stage')
    @classmethod
    def validate_stage(cls, v: str) -> str:
        """The decrypt step has to run before the tests."""
        if v not in CI_STAGES:
            raise ValueError(f"CI stage must be one of {', '.join(CI_STAGES)}")
        return v

    @field_validator('repo_slug')
    @classmethod
    def validate_slug(cls, v: Optional[str]) -> Optional[str]:
        """Validate slug has the owner/repo shape."""
        if v is None:
            return None
        v = v.strip()
        parts = v.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Repository slug must look like owner/repo: {v!r}")
        return v


class BranchSettings(BaseModel):
    """Release branch roles for the packaging filter."""

    default: str = Field(default="master", description="Branch that bundles the plaintext token")
    submission: List[str] = Field(
        default_factory=lambda: ["cran"],
        description="Branches whose package bundle must exclude the plaintext token"
    )


class WorkflowConfig(BaseModel):
    """
    Domain model for the project configuration.

    Contains everything the token workflow needs to locate and edit files.
    """

    model_config = ConfigDict(extra="ignore")

    oauth: OAuthClientSettings = Field(default_factory=OAuthClientSettings)
    artifacts: ArtifactPaths = Field(default_factory=ArtifactPaths)
    ignore_lists: IgnoreListSettings = Field(default_factory=IgnoreListSettings)
    ci: CISettings = Field(default_factory=CISettings)
    branches: BranchSettings = Field(default_factory=BranchSettings)

    @property
    def plaintext_path(self) -> str:
        return self.artifacts.plaintext

    @property
    def encrypted_path(self) -> str:
        return self.artifacts.encrypted_path

    def to_file_dict(self) -> dict:
        """JSON-ready dict for writing the config file. The client secret is left out."""
        data = self.model_dump(mode="json", exclude={"oauth": {"client_secret"}})
        return data
