"""Cronofy API client.

Every call reads the access token from the credential manager, sends exactly
one request and maps error responses to typed exceptions. Nothing is retried:
on AuthenticationFailureError call refresh_access_token() and try again.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timezone
from typing import Any

import httpx

from cronofy import config
from cronofy.auth import Auth, Credentials
from cronofy.dispatch import do_request, raise_for_status
from cronofy.exceptions import AuthenticationFailureError

logger = logging.getLogger(__name__)


def to_iso8601(value: datetime | date | None) -> str | None:
    """Format a time value as UTC ISO-8601.

    Naive datetimes are taken to be UTC. Dates are formatted as YYYY-MM-DD.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Expected datetime or date, got {type(value).__name__}")


def _bool_param(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"


class Client:
    """Cronofy API client with OAuth authentication.

    Usage:
        client = Client(client_id, client_secret, access_token=token)

        # List calendars
        calendars = client.list_calendars()

        # Upsert an event
        client.create_or_update_event(
            calendar_id,
            {
                "event_id": "qTtZdczOccgaPncGJaCiLg",
                "summary": "Board meeting",
                "start": datetime(2026, 10, 20, 15, 30, tzinfo=timezone.utc),
                "end": datetime(2026, 10, 20, 17, 0, tzinfo=timezone.utc),
            },
        )
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        access_token: str | None = None,
        refresh_token: str | None = None,
        *,
        api_url: str | None = None,
        app_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Cronofy client.

        Args:
            client_id: OAuth client ID.
            client_secret: OAuth client secret.
            access_token: Access token, if already authorized.
            refresh_token: Refresh token, if already authorized.
            api_url: API base URL. Defaults to config.api_url().
            app_url: OAuth application base URL. Defaults to config.app_url().
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for testing.
        """
        self.api_url = (api_url or config.api_url()).rstrip("/")
        self._auth = Auth(
            client_id,
            client_secret,
            access_token=access_token,
            refresh_token=refresh_token,
            app_url=app_url,
            timeout=timeout,
            transport=transport,
        )

    @property
    def auth(self) -> Auth:
        return self._auth

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an authenticated API request.

        Args:
            method: HTTP method.
            path: API path (e.g., "/v1/calendars").
            params: Query parameters.
            json: JSON body.

        Returns:
            The successful response.

        Raises:
            CredentialsMissingError: If no access token is set. No request is sent.
            APIError: If the API returns an error status.
        """
        access_token = self._auth.access_token()

        headers = {"Authorization": f"Bearer {access_token}"}
        if json is not None:
            headers["Content-Type"] = "application/json"

        url = f"{self.api_url}/{path.lstrip('/')}"
        logger.debug(f"{method} {url}")

        def send() -> httpx.Response:
            response = self._auth.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                withhold_token=True,
            )
            return raise_for_status(response)

        try:
            return do_request(send)
        except AuthenticationFailureError:
            self._auth.mark_expired(access_token)
            raise

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        return response.json()

    # =========================================================================
    # Calendars
    # =========================================================================

    def list_calendars(self) -> dict[str, Any]:
        """List the user's calendars across all calendar accounts.

        Returns:
            Decoded response, e.g. ``{"calendars": [...]}``.
        """
        return self._parse_json(self._request("GET", "/v1/calendars"))

    # =========================================================================
    # Events
    # =========================================================================

    def create_or_update_event(self, calendar_id: str, event: dict[str, Any]) -> None:
        """Create an event, or update the one matching ``event_id``.

        Args:
            calendar_id: Cronofy ID of the calendar to contain the event.
            event: Event fields. ``event_id`` is the caller's own identifier,
                not Cronofy's. ``start`` and ``end`` may be datetimes, which
                are sent as UTC ISO-8601; everything else passes through.
        """
        body = dict(event)
        for key in ("start", "end"):
            if isinstance(body.get(key), (datetime, date)):
                body[key] = to_iso8601(body[key])

        self._request("POST", f"/v1/calendars/{calendar_id}/events", json=body)

    upsert_event = create_or_update_event

    def read_events(
        self,
        from_: datetime | date | None = None,
        to: datetime | date | None = None,
        tzid: str | None = "Etc/UTC",
        include_deleted: bool | None = None,
        include_moved: bool | None = None,
        last_modified: datetime | None = None,
    ) -> dict[str, Any]:
        """Read a page of events across all of the user's calendars.

        Args:
            from_: Earliest time to return events from.
            to: Time to return events up until.
            tzid: IANA time zone identifier.
            include_deleted: Whether to include deleted events.
            include_moved: Whether to include events moved out of the window.
            last_modified: Only return events modified on or after this time.

        Returns:
            Paged response; follow ``pages.next_page`` with get_events_page().
        """
        params = {
            "from": to_iso8601(from_),
            "to": to_iso8601(to),
            "tzid": tzid,
            "include_deleted": _bool_param(include_deleted),
            "include_moved": _bool_param(include_moved),
            "last_modified": to_iso8601(last_modified),
        }
        params = {key: value for key, value in params.items() if value is not None}

        return self._parse_json(self._request("GET", "/v1/events", params=params))

    def get_events_page(self, page_url: str) -> dict[str, Any]:
        """Fetch a page of events from a ``next_page`` URL.

        Args:
            page_url: Absolute page URL returned by Cronofy.

        Returns:
            Paged response.
        """
        page_path = page_url
        if page_path.startswith(self.api_url):
            page_path = page_path[len(self.api_url) :]

        return self._parse_json(self._request("GET", page_path))

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Delete an event from a calendar.

        Args:
            calendar_id: Cronofy ID of the calendar containing the event.
            event_id: The caller's identifier for the event.
        """
        # Cronofy expects the event_id in the body of the DELETE
        self._request("DELETE", f"/v1/calendars/{calendar_id}/events", json={"event_id": event_id})

    # =========================================================================
    # Channels
    # =========================================================================

    def create_channel(self, callback_url: str) -> dict[str, Any]:
        """Create a push notification channel.

        Args:
            callback_url: URL Cronofy will POST change notifications to.

        Returns:
            Decoded response, e.g. ``{"channel": {...}}``.
        """
        response = self._request("POST", "/v1/channels", json={"callback_url": callback_url})
        return self._parse_json(response)

    def list_channels(self) -> dict[str, Any]:
        """List the user's notification channels."""
        return self._parse_json(self._request("GET", "/v1/channels"))

    # =========================================================================
    # Authorization
    # =========================================================================

    def user_auth_link(
        self,
        redirect_uri: str,
        scope: Sequence[str] | None = None,
        state: str | None = None,
    ) -> str:
        """Build the authorization URL to send the user to.

        Args:
            redirect_uri: URI to return the user to once authorization completes.
            scope: Scopes to request (default: all scopes).
            state: Optional opaque value echoed back to redirect_uri.

        Returns:
            Authorization URL.
        """
        return self._auth.user_auth_link(redirect_uri, scope, state=state)

    def get_token_from_code(self, code: str, redirect_uri: str) -> Credentials:
        """Exchange an authorization code for credentials."""
        return self._auth.get_token_from_code(code, redirect_uri)

    def refresh_access_token(self) -> Credentials:
        """Refresh the access token, and the refresh token when reissued."""
        return self._auth.refresh()

    def close(self):
        """Close the HTTP client."""
        self._auth.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Backwards-compatible name
Cronofy = Client
