"""
Tests for the plaintext token store and the test-suite loader.
"""

import json
import os
import stat

import pytest

from citoken.domain.errors import SecretStoreError, TokenUnavailableError
from citoken.domain.token import OAuthToken
from citoken.infrastructure.secrets.store import SecretStoreWriter
from citoken.testing import load_test_token, token_available


class TestSecretStoreWriter:

    def setup_method(self):
        self.token = OAuthToken.from_token_response({"access_token": "abc", "expires_in": 60})

    def test_write_creates_parents(self, project_dir):
        store = SecretStoreWriter(project_dir)
        written = store.write(self.token, "tests/testthat/token.json")

        assert written == project_dir / "tests" / "testthat" / "token.json"
        assert json.loads(written.read_text())["access_token"] == "abc"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_write_is_owner_only(self, project_dir):
        written = SecretStoreWriter(project_dir).write(self.token, "token.json")
        assert stat.S_IMODE(written.stat().st_mode) == 0o600

    def test_read_back(self, project_dir):
        store = SecretStoreWriter(project_dir)
        store.write(self.token, "token.json")
        assert store.read("token.json") == self.token

    def test_read_missing(self, project_dir):
        with pytest.raises(FileNotFoundError):
            SecretStoreWriter(project_dir).read("token.json")

    def test_read_corrupt(self, project_dir):
        (project_dir / "token.json").write_text("not json")
        with pytest.raises(SecretStoreError):
            SecretStoreWriter(project_dir).read("token.json")

        (project_dir / "token.json").write_text('{"token_type": "Bearer"}')
        with pytest.raises(SecretStoreError):
            SecretStoreWriter(project_dir).read("token.json")

    def test_discard(self, project_dir):
        store = SecretStoreWriter(project_dir)
        store.write(self.token, "token.json")

        assert store.discard("token.json") is True
        assert not store.exists("token.json")
        assert store.discard("token.json") is False


class TestTestingHelpers:

    def test_default_path_from_config(self, project_dir):
        assert not token_available(project_dir=project_dir)
        with pytest.raises(TokenUnavailableError):
            load_test_token(project_dir=project_dir)

        SecretStoreWriter(project_dir).write(
            OAuthToken.from_token_response({"access_token": "abc"}), "tests/testthat/token.json"
        )
        assert token_available(project_dir=project_dir)
        assert load_test_token(project_dir=project_dir).access_token.get_secret_value() == "abc"

    def test_configured_path(self, project_dir):
        (project_dir / "citoken.json").write_text(json.dumps({"artifacts": {"plaintext": "secret/tok.json"}}))
        SecretStoreWriter(project_dir).write(
            OAuthToken.from_token_response({"access_token": "xyz"}), "secret/tok.json"
        )
        assert load_test_token(project_dir=project_dir).access_token.get_secret_value() == "xyz"

    def test_env_override(self, project_dir, monkeypatch):
        target = project_dir / "elsewhere.json"
        SecretStoreWriter(project_dir).write(OAuthToken.from_token_response({"access_token": "env"}), target)
        monkeypatch.setenv("CITOKEN_TOKEN_PATH", str(target))
        assert load_test_token(project_dir=project_dir).access_token.get_secret_value() == "env"

    def test_corrupt_token_is_unavailable(self, project_dir):
        path = project_dir / "tests" / "testthat" / "token.json"
        path.parent.mkdir(parents=True)
        path.write_text("{}")
        with pytest.raises(TokenUnavailableError):
            load_test_token(project_dir=project_dir)
