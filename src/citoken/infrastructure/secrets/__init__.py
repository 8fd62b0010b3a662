"""Plaintext token persistence."""

from citoken.infrastructure.secrets.store import SecretStoreWriter

__all__ = ["SecretStoreWriter"]
