"""
Tests for the encryption service.
"""

import pytest

from citoken.application.encryption_service import EncryptionService
from citoken.domain.config import EncryptionMode, WorkflowConfig
from citoken.domain.errors import CitokenError, ExternalToolError
from citoken.infrastructure.crypto.cipher import EnvVarNames, KeyMaterial
from citoken.infrastructure.tools.runner import CommandResult
from citoken.infrastructure.tools.travis import TravisClient

from conftest import FakeRunner

P = "tests/testthat/token.json"
E = "tests/testthat/token.json.enc"
CONTENT = b'{"access_token": "abc", "token_type": "Bearer"}\n'


class RecordingTravis:
    """Travis handler that remembers `env set` values and fakes `encrypt-file`."""

    def __init__(self):
        self.env = {}

    def __call__(self, command):
        if command[1:3] == ["env", "set"]:
            self.env[command[3]] = command[4]
            return CommandResult(tuple(command), 0, f"[+] setting environment variable ${command[3]}", "")
        if command[1] == "encrypt-file":
            return CommandResult(
                tuple(command), 0,
                "openssl aes-256-cbc -K $encrypted_feed_key -iv $encrypted_feed_iv "
                f"-in {command[3]} -out {command[2]} -d\n",
                "",
            )
        raise AssertionError(command)


class TestEncryptionService:

    def setup_method(self):
        self.travis = RecordingTravis()
        self.runner = FakeRunner(travis=self.travis)

    def make(self, project_dir, **ci):
        config = WorkflowConfig(ci=ci)
        return EncryptionService(project_dir, config, TravisClient(self.runner))

    def plant(self, project_dir):
        path = project_dir / P
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(CONTENT)
        return path

    def test_local_mode_round_trip(self, project_dir):
        plaintext = self.plant(project_dir)
        service = self.make(project_dir, encryption_mode="local")

        result = service.encrypt()
        names = EnvVarNames.for_path(P)

        assert result.mode is EncryptionMode.LOCAL
        assert (result.key_var, result.iv_var) == (names.key_var, names.iv_var)
        assert set(self.travis.env) == {names.key_var, names.iv_var}
        assert (project_dir / E).read_bytes() != CONTENT

        plaintext.unlink()
        restored = service.decrypt_from_env(self.travis.env)
        assert restored == plaintext
        assert restored.read_bytes() == CONTENT

    def test_local_mode_registers_key_before_iv(self, project_dir):
        self.plant(project_dir)
        self.make(project_dir).encrypt(mode=EncryptionMode.LOCAL, slug="owner/pkg")

        env_calls = [call for call in self.runner.calls if call[0] == "travis"]
        assert [call[3] for call in env_calls] == [EnvVarNames.for_path(P).key_var, EnvVarNames.for_path(P).iv_var]
        assert all("owner/pkg" in call for call in env_calls)

    def test_external_mode(self, project_dir):
        self.plant(project_dir)
        result = self.make(project_dir, repo_slug="owner/pkg").encrypt()

        assert result.mode is EncryptionMode.EXTERNAL
        assert result.key_var == "encrypted_feed_key"
        assert self.runner.calls[-1][:5] == ["travis", "encrypt-file", P, E, "--force"]
        assert self.runner.calls[-1][-2:] == ["--repo", "owner/pkg"]

    def test_missing_plaintext(self, project_dir):
        with pytest.raises(FileNotFoundError):
            self.make(project_dir).encrypt()
        assert self.runner.calls == []

    def test_travis_not_installed(self, project_dir):
        self.plant(project_dir)
        self.runner.available = {"git"}
        with pytest.raises(ExternalToolError, match="not installed"):
            self.make(project_dir).encrypt()

    def test_decrypt_with_wrong_key(self, project_dir):
        self.plant(project_dir)
        service = self.make(project_dir, encryption_mode="local")
        service.encrypt()

        names = EnvVarNames.for_path(P)
        wrong = KeyMaterial("11" * 32, self.travis.env[names.iv_var])
        try:
            restored = service.decrypt(wrong, output="out.json")
        except CitokenError:
            return
        assert restored.read_bytes() != CONTENT

    def test_decrypt_from_env_missing_vars(self, project_dir):
        service = self.make(project_dir)
        with pytest.raises(CitokenError, match="not set"):
            service.decrypt_from_env({})

    def test_decrypt_from_env_invalid_material(self, project_dir):
        names = EnvVarNames.for_path(P)
        service = self.make(project_dir)
        with pytest.raises(CitokenError, match="Invalid key material"):
            service.decrypt_from_env({names.key_var: "abc", names.iv_var: "00" * 16})

    def test_decrypt_missing_encrypted_file(self, project_dir):
        with pytest.raises(FileNotFoundError):
            self.make(project_dir).decrypt(KeyMaterial.generate())
