"""Symmetric encryption of the token file."""

from citoken.infrastructure.crypto.cipher import Aes256CbcCipher, EnvVarNames, KeyMaterial

__all__ = ["Aes256CbcCipher", "EnvVarNames", "KeyMaterial"]
