"""Cronofy API client with OAuth authentication.

Usage:
    from cronofy import Client

    client = Client(client_id, client_secret)

    # Send the user to authorize, then exchange the returned code
    url = client.user_auth_link("https://example.com/callback")
    client.get_token_from_code(code, "https://example.com/callback")

    # Read events
    events = client.read_events(from_=datetime(2026, 10, 1, tzinfo=timezone.utc))

    # Refresh when the access token is rejected
    try:
        client.list_calendars()
    except AuthenticationFailureError:
        client.refresh_access_token()
        client.list_calendars()
"""

from cronofy.auth import DEFAULT_OAUTH_SCOPE, Auth, Credentials, TokenState
from cronofy.client import Client, Cronofy
from cronofy.exceptions import (
    APIError,
    AuthenticationFailureError,
    AuthorizationFailureError,
    CredentialsMissingError,
    CronofyError,
    InvalidRequestError,
    NotFoundError,
    TooManyRequestsError,
    UnknownError,
)

__all__ = [
    "Client",
    "Cronofy",
    "Auth",
    "Credentials",
    "TokenState",
    "DEFAULT_OAUTH_SCOPE",
    "CronofyError",
    "CredentialsMissingError",
    "APIError",
    "AuthenticationFailureError",
    "AuthorizationFailureError",
    "NotFoundError",
    "InvalidRequestError",
    "TooManyRequestsError",
    "UnknownError",
]
