"""
Tests for the token and configuration domain models.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import SecretStr, ValidationError

from citoken.domain.config import (
    ArtifactPaths,
    CISettings,
    EncryptionMode,
    IgnoreStyle,
    OAuthClientSettings,
    WorkflowConfig,
)
from citoken.domain.token import OAuthToken


class TestOAuthToken:
    """Test cases for OAuthToken."""

    def test_from_token_response(self, token_payload):
        issued = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        token = OAuthToken.from_token_response(token_payload, obtained_at=issued)

        assert token.access_token.get_secret_value() == token_payload["access_token"]
        assert token.refresh_token.get_secret_value() == token_payload["refresh_token"]
        assert token.token_type == "Bearer"
        assert token.expires_at == issued + timedelta(seconds=3599)
        assert token.scopes == ["https://www.googleapis.com/auth/drive", "openid"]

    def test_from_token_response_requires_access_token(self):
        with pytest.raises(ValueError):
            OAuthToken.from_token_response({"token_type": "Bearer"})

    def test_minimal_response_defaults(self):
        token = OAuthToken.from_token_response({"access_token": "abc", "token_type": ""})
        assert token.token_type == "Bearer"
        assert token.refresh_token is None
        assert token.expires_at is None
        assert token.scopes == []

    def test_empty_access_token_rejected(self):
        with pytest.raises(ValidationError):
            OAuthToken(access_token=SecretStr("  "))

    def test_is_expired(self):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        token = OAuthToken(access_token=SecretStr("abc"), expires_at=now + timedelta(seconds=60))

        assert not token.is_expired(now=now)
        assert token.is_expired(now=now, leeway=60)
        assert token.is_expired(now=now + timedelta(seconds=61))

    def test_token_without_expiry_never_expires(self):
        token = OAuthToken(access_token=SecretStr("abc"))
        assert not token.is_expired(now=datetime(2999, 1, 1, tzinfo=timezone.utc))

    def test_naive_datetimes_are_utc(self):
        token = OAuthToken(access_token=SecretStr("abc"), expires_at=datetime(2024, 1, 1))
        assert token.expires_at.tzinfo is timezone.utc

    def test_secret_hidden_in_repr(self):
        token = OAuthToken(access_token=SecretStr("super-secret-value"))
        assert "super-secret-value" not in repr(token)
        assert "super-secret-value" not in str(token)

    def test_storage_dict_round_trip(self, token_payload):
        token = OAuthToken.from_token_response(token_payload)
        restored = OAuthToken(**token.to_storage_dict())

        assert restored == token
        assert restored.to_storage_dict()["access_token"] == token_payload["access_token"]

    def test_authorization_header(self):
        token = OAuthToken(access_token=SecretStr("abc"))
        assert token.authorization_header() == {"Authorization": "Bearer abc"}


class TestWorkflowConfig:
    """Test cases for WorkflowConfig and its sections."""

    def test_defaults(self):
        config = WorkflowConfig()

        assert config.plaintext_path == "tests/testthat/token.json"
        assert config.encrypted_path == "tests/testthat/token.json.enc"
        assert config.ignore_lists.vcs_file == ".gitignore"
        assert config.ignore_lists.vcs_style is IgnoreStyle.GLOB
        assert config.ignore_lists.dist_file == ".Rbuildignore"
        assert config.ignore_lists.dist_style is IgnoreStyle.REGEX
        assert config.ci.config_file == ".travis.yml"
        assert config.ci.encryption_mode is EncryptionMode.EXTERNAL
        assert config.branches.submission == ["cran"]

    def test_explicit_encrypted_path(self):
        paths = ArtifactPaths(plaintext="tests/token.json", encrypted="tests/secret.bin")
        assert paths.encrypted_path == "tests/secret.bin"

    def test_paths_are_normalized(self):
        paths = ArtifactPaths(plaintext="tests\\testthat\\token.json")
        assert paths.plaintext == "tests/testthat/token.json"

    def test_absolute_path_rejected(self):
        with pytest.raises(ValidationError):
            ArtifactPaths(plaintext="/etc/token.json")

    def test_slug_shape(self):
        assert CISettings(repo_slug=" owner/repo ").repo_slug == "owner/repo"
        with pytest.raises(ValidationError):
            CISettings(repo_slug="just-a-name")

    def test_stage_must_run_before_tests(self):
        with pytest.raises(ValidationError):
            CISettings(stage="after_success")

    def test_client_secret_from_env(self, monkeypatch):
        monkeypatch.setenv("CITOKEN_CLIENT_SECRET", "from-env")
        assert OAuthClientSettings().resolved_client_secret() == "from-env"
        assert OAuthClientSettings(client_secret="inline").resolved_client_secret() == "inline"

    def test_file_dict_omits_client_secret(self):
        config = WorkflowConfig(oauth={"client_id": "id", "client_secret": "shh"})
        data = config.to_file_dict()

        assert data["oauth"]["client_id"] == "id"
        assert "client_secret" not in data["oauth"]
        assert data["ignore_lists"]["dist_style"] == "regex"
