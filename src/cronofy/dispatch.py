"""Guarded execution of a single HTTP request."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import httpx

from cronofy.exceptions import error_for_response

T = TypeVar("T")


def do_request(work: Callable[[], T]) -> T:
    """Run one unit of work, translating HTTP error responses.

    Args:
        work: Zero-argument callable performing one request. It must let
            ``httpx.HTTPStatusError`` escape for non-success responses.

    Returns:
        Whatever ``work`` returns, unchanged.

    Raises:
        APIError: Subclass keyed by the response status code.
    """
    try:
        return work()
    except httpx.HTTPStatusError as e:
        raise error_for_response(e.response) from e


def raise_for_status(response: httpx.Response) -> httpx.Response:
    """Raise ``httpx.HTTPStatusError`` for non-success responses."""
    response.raise_for_status()
    return response
