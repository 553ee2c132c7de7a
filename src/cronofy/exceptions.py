"""Cronofy client exceptions."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType

import httpx


class CronofyError(Exception):
    """Base exception for Cronofy client errors."""

    pass


class CredentialsMissingError(CronofyError):
    """Raised when an operation needs an access token and none is set."""

    def __init__(self, message: str = "No access token available. Authorize the client first."):
        super().__init__(message)


class APIError(CronofyError):
    """Raised when the Cronofy API responds with a non-success status.

    Attributes:
        status: Upstream status line, e.g. ``"404 Not Found"``.
        status_code: Numeric HTTP status.
        response: The full upstream response (headers and body).
    """

    def __init__(self, status: str, response: httpx.Response):
        self.status = status
        self.status_code = response.status_code
        self.response = response
        super().__init__(status)

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def body(self) -> str:
        return self.response.text


class AuthenticationFailureError(APIError):
    """401 - access token missing, expired or revoked."""


class AuthorizationFailureError(APIError):
    """403 - token lacks the scope for this operation."""


class NotFoundError(APIError):
    """404 - resource does not exist."""


class InvalidRequestError(APIError):
    """422 - request was understood but failed validation."""


class TooManyRequestsError(APIError):
    """429 - rate limit exceeded."""


class UnknownError(APIError):
    """Any other non-success status."""


ERRORS_BY_STATUS: Mapping[HTTPStatus, type[APIError]] = MappingProxyType(
    {
        HTTPStatus.UNAUTHORIZED: AuthenticationFailureError,
        HTTPStatus.FORBIDDEN: AuthorizationFailureError,
        HTTPStatus.NOT_FOUND: NotFoundError,
        HTTPStatus.UNPROCESSABLE_ENTITY: InvalidRequestError,
        HTTPStatus.TOO_MANY_REQUESTS: TooManyRequestsError,
    }
)


def error_for_response(response: httpx.Response) -> APIError:
    """Build the domain error for a failed response.

    Args:
        response: Response with a non-success status.

    Returns:
        Instance of the mapped APIError subclass, UnknownError if unmapped.
    """
    error_class = ERRORS_BY_STATUS.get(response.status_code, UnknownError)
    status = f"{response.status_code} {response.reason_phrase}".strip()
    return error_class(status, response)
