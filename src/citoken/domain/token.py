"""
OAuth token domain model.

This module defines the credential artifact the whole workflow moves
around: the token returned by the authorization exchange.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OAuthToken(BaseModel):
    """
    Domain model for an OAuth2 bearer token.

    Secrets are held as SecretStr so they never show up in reprs or logs;
    to_storage_dict() is the only place they are revealed.
    """

    model_config = ConfigDict(frozen=True)

    access_token: SecretStr = Field(..., description="Access token issued by the provider")
    token_type: str = Field(default="Bearer", description="Token type, normally Bearer")
    refresh_token: Optional[SecretStr] = Field(default=None, description="Refresh token, if issued")
    expires_at: Optional[datetime] = Field(default=None, description="Absolute expiry time (UTC)")
    scopes: List[str] = Field(default_factory=list, description="Granted scopes")
    obtained_at: datetime = Field(default_factory=_utcnow, description="When the token was issued")

    @field_validator('access_token')
    @classmethod
    def validate_access_token(cls, v: SecretStr) -> SecretStr:
        """Validate access token is not empty."""
        if not v.get_secret_value().strip():
            raise ValueError("Access token cannot be empty")
        return v

    @field_validator('expires_at', 'obtained_at')
    @classmethod
    def ensure_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat naive datetimes as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_token_response(
        cls,
        payload: Dict[str, Any],
        obtained_at: Optional[datetime] = None,
    ) -> "OAuthToken":
        """
        Build a token from an RFC 6749 token endpoint response.

        Args:
            payload: Decoded JSON body of the token response
            obtained_at: Issue time, defaults to now

        Returns:
            OAuthToken domain model

        Raises:
            ValueError: If the payload carries no access_token
        """
        if not payload.get("access_token"):
            raise ValueError("Token response does not contain an access_token")

        issued = obtained_at or _utcnow()
        expires_at = None
        if payload.get("expires_in") is not None:
            expires_at = issued + timedelta(seconds=int(payload["expires_in"]))

        scope = payload.get("scope") or ""
        scopes = scope.split() if isinstance(scope, str) else list(scope)

        return cls(
            access_token=SecretStr(payload["access_token"]),
            token_type=payload.get("token_type") or "Bearer",
            refresh_token=SecretStr(payload["refresh_token"]) if payload.get("refresh_token") else None,
            expires_at=expires_at,
            scopes=scopes,
            obtained_at=issued,
        )

    def is_expired(self, now: Optional[datetime] = None, leeway: int = 0) -> bool:
        """Whether the token has expired, `leeway` seconds early. Tokens without expiry never expire."""
        if self.expires_at is None:
            return False
        now = now or _utcnow()
        return now + timedelta(seconds=leeway) >= self.expires_at

    def authorization_header(self) -> Dict[str, str]:
        """HTTP Authorization header for this token."""
        return {"Authorization": f"{self.token_type} {self.access_token.get_secret_value()}"}

    def to_storage_dict(self) -> Dict[str, Any]:
        """Serializable form with secrets revealed, for the plaintext fixture file."""
        return {
            "access_token": self.access_token.get_secret_value(),
            "token_type": self.token_type,
            "refresh_token": self.refresh_token.get_secret_value() if self.refresh_token else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "scopes": list(self.scopes),
            "obtained_at": self.obtained_at.isoformat(),
        }
