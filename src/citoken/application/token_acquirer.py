"""
Token acquirer.

Runs the OAuth2 authorization-code exchange: sends the maintainer to the
provider's consent page, takes back the code (or the whole redirect URL)
and trades it for a token at the token endpoint. No retries; a failed
exchange is repeated by running the command again.
"""

from __future__ import annotations

import logging
import secrets
import webbrowser
from typing import Callable, Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from citoken.domain.config import OAuthClientSettings
from citoken.domain.errors import AuthorizationError
from citoken.domain.token import OAuthToken

logger = logging.getLogger(__name__)

CodePrompt = Callable[[str], str]
BrowserOpener = Callable[[str], bool]


def parse_authorization_response(response: str, expected_state: Optional[str] = None) -> str:
    """
    Extract the authorization code from what the maintainer pasted.

    Accepts either the bare code or the full redirect URL.

    Raises:
        AuthorizationError: If the provider reported an error, the state
            does not match, or no code is present
    """
    response = response.strip()
    if not response:
        raise AuthorizationError("No authorization code was entered")

    if "://" not in response and "?" not in response:
        return response

    query = parse_qs(urlparse(response).query)
    if "error" in query:
        description = query.get("error_description", [""])[0]
        raise AuthorizationError(f"Authorization was denied: {query['error'][0]} {description}".strip())

    state = query.get("state", [None])[0]
    if expected_state is not None and state is not None and state != expected_state:
        raise AuthorizationError("State parameter does not match; discard this response and retry")

    codes = query.get("code")
    if not codes or not codes[0]:
        raise AuthorizationError("Redirect URL does not contain an authorization code")
    return codes[0]


class TokenAcquirer:
    """OAuth2 authorization-code flow against one provider."""

    def __init__(
        self,
        settings: OAuthClientSettings,
        http_client: Optional[httpx.Client] = None,
        open_browser: Optional[BrowserOpener] = None,
    ):
        self.settings = settings
        self._http_client = http_client
        self._open_browser = open_browser or webbrowser.open

    def authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.settings.client_id,
            "redirect_uri": self.settings.redirect_uri,
            "state": state,
        }
        if self.settings.scopes:
            params["scope"] = " ".join(self.settings.scopes)
        separator = "&" if "?" in self.settings.authorize_url else "?"
        return f"{self.settings.authorize_url}{separator}{urlencode(params)}"

    def exchange_code(self, code: str) -> OAuthToken:
        """
        Trade an authorization code for a token.

        Raises:
            AuthorizationError: On transport errors, non-2xx responses or a
                response without an access token
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
            "client_id": self.settings.client_id,
        }
        client_secret = self.settings.resolved_client_secret()
        if client_secret:
            data["client_secret"] = client_secret

        client = self._http_client or httpx.Client(timeout=self.settings.timeout)
        try:
            response = client.post(
                self.settings.token_url,
                data=data,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error("Token request to %s failed: %s", self.settings.token_url, e)
            raise AuthorizationError(f"Token request failed: {e}") from e
        finally:
            if self._http_client is None:
                client.close()

        if response.status_code >= 400:
            logger.error("Token endpoint returned %s", response.status_code)
            raise AuthorizationError(
                f"Token endpoint returned {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthorizationError("Token endpoint did not return JSON") from e

        if not isinstance(payload, dict):
            raise AuthorizationError("Token endpoint returned an unexpected body")

        if "error" in payload:
            raise AuthorizationError(
                f"Token endpoint refused the code: {payload['error']} {payload.get('error_description', '')}".strip()
            )

        try:
            token = OAuthToken.from_token_response(payload)
        except ValueError as e:
            raise AuthorizationError(str(e)) from e

        logger.info("Obtained %s token with scopes %s", token.token_type, token.scopes)
        return token

    def acquire(self, prompt: CodePrompt) -> OAuthToken:
        """
        Interactive flow: open the consent page, ask for the code, exchange it.

        Args:
            prompt: Called with the authorization URL, returns what the
                maintainer pasted back
        """
        state = secrets.token_urlsafe(16)
        url = self.authorization_url(state)

        if not self._open_browser(url):
            logger.info("Could not open a browser; the URL has to be opened manually")

        code = parse_authorization_response(prompt(url), expected_state=state)
        return self.exchange_code(code)
