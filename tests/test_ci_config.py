"""
Tests for the CI configuration editor.
"""

import pytest
import yaml

from citoken.domain.consistency import format_decrypt_command
from citoken.domain.errors import ManifestError
from citoken.infrastructure.manifest.ci_config import CIConfigFile

P = "tests/testthat/token.json"
E = "tests/testthat/token.json.enc"

TRAVIS_YML = """\
language: r
cache: packages
before_install:
  - sudo apt-get install -y libxml2-dev
script:
  - R CMD build .
  - R CMD check *tar.gz
"""


def write(tmp_path, content):
    path = tmp_path / ".travis.yml"
    path.write_text(content)
    return path


class TestCIConfigFile:

    def test_missing_file_is_empty(self, tmp_path):
        ci = CIConfigFile.load(tmp_path / ".travis.yml")
        assert ci.data == {}
        assert ci.decrypt_steps() == []

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ManifestError):
            CIConfigFile.load(write(tmp_path, "language: [r\n"))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ManifestError):
            CIConfigFile.load(write(tmp_path, "- a\n- b\n"))

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / ".travis.yml"
        path.write_bytes(b"language: r\n\xff\xfe\x00bad\n")
        with pytest.raises(ManifestError, match="UTF-8"):
            CIConfigFile.load(path)

    def test_ensure_decrypt_step_prepends_to_stage(self, tmp_path):
        path = write(tmp_path, TRAVIS_YML)
        ci = CIConfigFile.load(path)

        assert ci.ensure_decrypt_step(E, P, "encrypted_a_key", "encrypted_a_iv") is True
        ci.save()

        data = yaml.safe_load(path.read_text())
        assert data["before_install"] == [
            format_decrypt_command(E, P, "encrypted_a_key", "encrypted_a_iv"),
            "sudo apt-get install -y libxml2-dev",
        ]
        assert data["script"] == ["R CMD build .", "R CMD check *tar.gz"]
        assert list(data)[0] == "language"

    def test_ensure_is_idempotent(self, tmp_path):
        ci = CIConfigFile.load(write(tmp_path, TRAVIS_YML))
        ci.ensure_decrypt_step(E, P, "encrypted_a_key", "encrypted_a_iv")
        assert ci.ensure_decrypt_step(E, P, "encrypted_a_key", "encrypted_a_iv") is False
        assert len(ci.decrypt_steps()) == 1

    def test_rotated_keys_replace_old_step(self, tmp_path):
        ci = CIConfigFile.load(write(tmp_path, TRAVIS_YML))
        ci.ensure_decrypt_step(E, P, "encrypted_old_key", "encrypted_old_iv")
        ci.ensure_decrypt_step(E, P, "encrypted_new_key", "encrypted_new_iv")

        steps = ci.decrypt_steps()
        assert len(steps) == 1
        assert steps[0].key_var == "encrypted_new_key"

    def test_string_stage_and_other_stage_steps(self, tmp_path):
        content = (
            "language: r\n"
            "before_install: echo hi\n"
            f"before_script:\n  - {format_decrypt_command('old.enc', P, 'k', 'i')}\n"
        )
        ci = CIConfigFile.load(write(tmp_path, content))
        ci.ensure_decrypt_step(E, P, "encrypted_a_key", "encrypted_a_iv")

        assert ci.data["before_install"][1] == "echo hi"
        assert ci.data["before_script"] == []
        assert [s.input_path for s in ci.decrypt_steps()] == [E]

    def test_job_include_steps_are_found_and_cleaned(self, tmp_path):
        step = format_decrypt_command(E, P, "encrypted_a_key", "encrypted_a_iv")
        content = yaml.safe_dump({
            "language": "r",
            "jobs": {"include": [{"r": "release", "before_install": [step, {"not": "a string"}]}]},
        })
        ci = CIConfigFile.load(write(tmp_path, content))
        assert len(ci.decrypt_steps()) == 1

        ci.ensure_decrypt_step(E, P, "encrypted_a_key", "encrypted_a_iv")
        assert ci.data["jobs"]["include"][0]["before_install"] == [{"not": "a string"}]
        assert ci.data["before_install"] == [step]
        assert len(ci.decrypt_steps()) == 1
