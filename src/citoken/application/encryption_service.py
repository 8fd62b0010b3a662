"""
Encryption service.

Produces the encrypted token and registers its key/IV with the CI
provider, either through the vendor CLI (`travis encrypt-file`) or locally
with the AES cipher plus `travis env set`. Also reproduces the CI-side
decrypt step for local verification.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from citoken.domain.config import EncryptionMode, WorkflowConfig
from citoken.domain.errors import CitokenError, ExternalToolError
from citoken.infrastructure.crypto.cipher import Aes256CbcCipher, EnvVarNames, KeyMaterial
from citoken.infrastructure.tools.travis import TravisClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncryptionResult:
    """Where the encrypted file went and which CI variables decrypt it."""

    plaintext: str
    encrypted: str
    key_var: str
    iv_var: str
    mode: EncryptionMode


class EncryptionService:
    """Encryptor for the plaintext token."""

    def __init__(self, project_dir: Path, config: WorkflowConfig, travis: TravisClient):
        self.project_dir = project_dir
        self.config = config
        self.travis = travis

    def _path(self, relative: str) -> Path:
        return self.project_dir / relative

    def encrypt(
        self,
        mode: Optional[EncryptionMode] = None,
        slug: Optional[str] = None,
    ) -> EncryptionResult:
        """
        Encrypt the plaintext token and register the decryption keys.

        Args:
            mode: Override the configured encryption mode
            slug: Repository slug passed to the CI tool; defaults to the
                configured slug, else the tool uses its cached one

        Raises:
            FileNotFoundError: If there is no plaintext token to encrypt
            SlugMismatchError: If the CI tool rejects the cached slug
            ExternalToolError: If the CI tool is missing or fails
        """
        mode = mode or self.config.ci.encryption_mode
        slug = slug or self.config.ci.repo_slug
        plaintext = self.config.plaintext_path
        encrypted = self.config.encrypted_path

        if not self._path(plaintext).is_file():
            raise FileNotFoundError(f"No plaintext token at {plaintext}; acquire one first")

        if not self.travis.is_available():
            raise ExternalToolError(
                f"'{self.travis.program}' CLI is not installed; it is needed to register the keys with CI"
            )

        if mode is EncryptionMode.EXTERNAL:
            output = self.travis.encrypt_file(plaintext, encrypted, slug=slug)
            logger.debug("%s encrypt-file output:\n%s", self.travis.program, output.raw_output)
            key_var, iv_var = output.decrypt_step.key_var, output.decrypt_step.iv_var
        else:
            names = EnvVarNames.for_path(plaintext)
            material = KeyMaterial.generate()
            # The encrypted file is only replaced once CI holds the new key and IV
            self.travis.set_env(names.key_var, material.key_hex, slug=slug)
            self.travis.set_env(names.iv_var, material.iv_hex, slug=slug)
            Aes256CbcCipher(material).encrypt_file(self._path(plaintext), self._path(encrypted))
            key_var, iv_var = names.key_var, names.iv_var

        logger.info("Encrypted %s -> %s (%s)", plaintext, encrypted, mode.value)
        return EncryptionResult(plaintext, encrypted, key_var, iv_var, mode)

    def decrypt(self, material: KeyMaterial, output: Optional[str] = None) -> Path:
        """
        Decrypt the encrypted token, as the CI step does.

        Raises:
            FileNotFoundError: If the encrypted file is missing
            CitokenError: If key or IV do not fit the file
        """
        source = self._path(self.config.encrypted_path)
        target = self._path(output or self.config.plaintext_path)
        try:
            return Aes256CbcCipher(material).decrypt_file(source, target)
        except ValueError as e:
            raise CitokenError(f"Could not decrypt {source.name}: wrong key or IV ({e})") from e

    def decrypt_from_env(
        self,
        environ: Optional[Mapping[str, str]] = None,
        key_var: Optional[str] = None,
        iv_var: Optional[str] = None,
        output: Optional[str] = None,
    ) -> Path:
        """
        Decrypt with key/IV read from CI environment variables.

        Variable names default to those derived from the plaintext path.
        """
        environ = os.environ if environ is None else environ
        names = EnvVarNames.for_path(self.config.plaintext_path)
        key_var = key_var or names.key_var
        iv_var = iv_var or names.iv_var

        missing = [name for name in (key_var, iv_var) if not environ.get(name)]
        if missing:
            raise CitokenError(f"Environment variables not set: {', '.join(missing)}")

        try:
            material = KeyMaterial(environ[key_var], environ[iv_var])
        except ValueError as e:
            raise CitokenError(f"Invalid key material in {key_var}/{iv_var}: {e}") from e
        return self.decrypt(material, output=output)
