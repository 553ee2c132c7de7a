"""Cronofy OAuth management using Authlib.

Holds the client identity and the current token pair, and performs the
authorization-code and refresh-token exchanges against the Cronofy
application server. Tokens live in memory only; persisting them is up to
the caller.

Expiry is never detected from the clock. A request rejected with 401 marks
the access token expired, and the caller decides when to refresh.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from authlib.integrations.httpx_client import OAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from cronofy import config
from cronofy.dispatch import do_request, raise_for_status
from cronofy.exceptions import APIError, CredentialsMissingError

logger = logging.getLogger(__name__)


DEFAULT_OAUTH_SCOPE = (
    "read_account",
    "list_calendars",
    "read_events",
    "create_event",
    "delete_event",
)


@dataclass(frozen=True)
class Credentials:
    """OAuth token pair issued to the client."""

    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: float | None = None
    scope: str | None = None

    @classmethod
    def from_token(cls, token: dict[str, Any]) -> Credentials:
        """Build credentials from a token endpoint response."""
        return cls(
            access_token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            expires_in=token.get("expires_in"),
            expires_at=token.get("expires_at"),
            scope=token.get("scope"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "expires_at": self.expires_at,
            "scope": self.scope,
        }


class TokenState(str, Enum):
    """Lifecycle of the held credentials."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"
    REVOKED = "revoked"


class Auth:
    """Cronofy OAuth credential manager.

    Token reads and replacements are serialized by a lock, so concurrent
    callers never observe a half-replaced token pair.

    Example:
        >>> auth = Auth("client-id", "client-secret")
        >>> url = auth.user_auth_link("https://example.com/callback")
        >>> credentials = auth.get_token_from_code(code, "https://example.com/callback")
    """

    AUTHORIZE_PATH = "/oauth/authorize"
    TOKEN_PATH = "/oauth/token"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        access_token: str | None = None,
        refresh_token: str | None = None,
        app_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the credential manager.

        Args:
            client_id: OAuth client ID.
            client_secret: OAuth client secret.
            access_token: Existing access token, if any.
            refresh_token: Existing refresh token, if any.
            app_url: OAuth application base URL. Defaults to config.app_url().
            timeout: Request timeout in seconds. Defaults to config.default_timeout().
            transport: Optional httpx transport, mainly for testing.
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.app_url = (app_url or config.app_url()).rstrip("/")

        self._credentials = Credentials(access_token=access_token, refresh_token=refresh_token)
        self._expired = False
        self._revoked = False
        self._lock = threading.RLock()

        self.session = OAuth2Client(
            client_id=client_id,
            client_secret=client_secret,
            token_endpoint_auth_method="client_secret_post",
            timeout=timeout if timeout is not None else config.default_timeout(),
            transport=transport,
        )
        # Let token endpoint failures surface with their status
        self.session.register_compliance_hook("access_token_response", raise_for_status)
        self.session.register_compliance_hook("refresh_token_response", raise_for_status)

    @property
    def authorize_url(self) -> str:
        return f"{self.app_url}{self.AUTHORIZE_PATH}"

    @property
    def token_url(self) -> str:
        return f"{self.app_url}{self.TOKEN_PATH}"

    @property
    def credentials(self) -> Credentials:
        """Current credentials snapshot."""
        with self._lock:
            return self._credentials

    @property
    def state(self) -> TokenState:
        with self._lock:
            if self._revoked:
                return TokenState.REVOKED
            if self._credentials.access_token is None:
                if self._credentials.refresh_token is not None:
                    return TokenState.EXPIRED
                return TokenState.UNAUTHENTICATED
            if self._expired:
                return TokenState.EXPIRED
            return TokenState.AUTHENTICATED

    def access_token(self) -> str:
        """Get the current access token.

        Raises:
            CredentialsMissingError: If no access token is set.
        """
        with self._lock:
            token = self._credentials.access_token
        if not token:
            raise CredentialsMissingError()
        return token

    def mark_expired(self, access_token: str) -> None:
        """Record that the remote service rejected ``access_token``.

        Ignored when the token has already been replaced.
        """
        with self._lock:
            if self._credentials.access_token == access_token and not self._expired:
                logger.info("Access token rejected by Cronofy, marking expired")
                self._expired = True

    def user_auth_link(
        self,
        redirect_uri: str,
        scope: Sequence[str] | None = None,
        state: str | None = None,
    ) -> str:
        """Build the URL to send the user to for authorization.

        Args:
            redirect_uri: URI to return the user to once authorization completes.
            scope: Scopes to request. Defaults to DEFAULT_OAUTH_SCOPE.
            state: Optional opaque value echoed back to redirect_uri.

        Returns:
            Authorization URL.
        """
        return prepare_grant_uri(
            self.authorize_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=redirect_uri,
            scope=list(scope or DEFAULT_OAUTH_SCOPE),
            state=state,
        )

    def get_token_from_code(self, code: str, redirect_uri: str) -> Credentials:
        """Exchange an authorization code for an access and refresh token.

        Args:
            code: Code returned to redirect_uri after authorization.
            redirect_uri: The redirect_uri used to obtain the code.

        Returns:
            The newly issued Credentials.

        Raises:
            APIError: If the token endpoint rejects the exchange.
        """
        with self._lock:
            token = do_request(
                lambda: self.session.fetch_token(
                    self.token_url,
                    grant_type="authorization_code",
                    code=code,
                    redirect_uri=redirect_uri,
                )
            )
            self._replace(Credentials.from_token(token))

        logger.info("Access token issued from authorization code")
        return self.credentials

    def refresh(self) -> Credentials:
        """Exchange the refresh token for a new access token.

        The refresh token is replaced too when Cronofy issues a new one.

        Returns:
            The refreshed Credentials.

        Raises:
            CredentialsMissingError: If no refresh token is held.
            APIError: If the refresh token is rejected.
        """
        with self._lock:
            refresh_token = self._credentials.refresh_token
            if not refresh_token:
                raise CredentialsMissingError("No refresh token available. Authorize the client first.")

            try:
                token = do_request(
                    lambda: self.session.refresh_token(self.token_url, refresh_token=refresh_token)
                )
            except APIError as e:
                if 400 <= e.status_code < 500 and e.status_code != 429:
                    logger.warning(f"Refresh token rejected ({e.status}), re-authorization required")
                    self._revoked = True
                raise

            credentials = Credentials.from_token(token)
            if credentials.refresh_token is None:
                credentials = Credentials(
                    access_token=credentials.access_token,
                    refresh_token=refresh_token,
                    expires_in=credentials.expires_in,
                    expires_at=credentials.expires_at,
                    scope=credentials.scope,
                )
            self._replace(credentials)

        logger.info("Access token refreshed")
        return self.credentials

    def _replace(self, credentials: Credentials) -> None:
        with self._lock:
            self._credentials = credentials
            self._expired = False
            self._revoked = False

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
