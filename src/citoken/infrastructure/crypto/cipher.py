"""
AES-256-CBC file cipher.

Byte compatible with `openssl aes-256-cbc -K <hex> -iv <hex>` (raw key and
IV, PKCS#7 padding, no salt header), which is what the CI decrypt step runs.
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

logger = logging.getLogger(__name__)

KEY_BYTES = 32
IV_BYTES = 16
BLOCK_BITS = 128
VAR_ID_LENGTH = 12


@dataclass(frozen=True)
class KeyMaterial:
    """Key and IV as lowercase hex strings."""

    key_hex: str
    iv_hex: str

    def __post_init__(self):
        key = bytes.fromhex(self.key_hex)
        iv = bytes.fromhex(self.iv_hex)
        if len(key) != KEY_BYTES:
            raise ValueError(f"AES-256 key must be {KEY_BYTES} bytes, got {len(key)}")
        if len(iv) != IV_BYTES:
            raise ValueError(f"CBC IV must be {IV_BYTES} bytes, got {len(iv)}")

    @classmethod
    def generate(cls) -> "KeyMaterial":
        return cls(secrets.token_hex(KEY_BYTES), secrets.token_hex(IV_BYTES))

    def __repr__(self) -> str:
        return "KeyMaterial(key_hex=***, iv_hex=***)"


@dataclass(frozen=True)
class EnvVarNames:
    """CI environment variables holding the key and IV of one file."""

    key_var: str
    iv_var: str

    @classmethod
    def for_path(cls, plaintext_path: str) -> "EnvVarNames":
        """Names derived from the SHA-1 of the plaintext path, as the CI tool does."""
        digest = hashlib.sha1(plaintext_path.encode("utf-8")).hexdigest()[:VAR_ID_LENGTH]
        return cls(f"encrypted_{digest}_key", f"encrypted_{digest}_iv")


class Aes256CbcCipher:
    """Symmetric cipher for the token file."""

    def __init__(self, material: KeyMaterial):
        self._key = bytes.fromhex(material.key_hex)
        self._iv = bytes.fromhex(material.iv_hex)

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, data: bytes) -> bytes:
        padder = padding.PKCS7(BLOCK_BITS).padder()
        padded = padder.update(data) + padder.finalize()
        encryptor = self._cipher().encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, data: bytes) -> bytes:
        """
        Decrypt and strip padding.

        Raises:
            ValueError: If the data is not block aligned or the padding is bad
                (wrong key or IV)
        """
        if len(data) % IV_BYTES:
            raise ValueError("Ciphertext length is not a multiple of the AES block size")
        decryptor = self._cipher().decryptor()
        padded = decryptor.update(data) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()

    def encrypt_file(self, source: Path, destination: Path) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.encrypt(source.read_bytes()))
        logger.info("Encrypted %s -> %s", source, destination)
        return destination

    def decrypt_file(self, source: Path, destination: Path) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.decrypt(source.read_bytes()))
        logger.info("Decrypted %s -> %s", source, destination)
        return destination
