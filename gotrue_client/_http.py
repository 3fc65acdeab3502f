"""Shared HTTP request utilities for sync and async transports."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, TypeVar

import httpx

from .exceptions import InternalError, TransportError
from .types import Session, User

T = TypeVar("T")


def build_headers(static_headers: Mapping[str, str], access_token: str | None = None) -> dict[str, str]:
    """Build request headers: JSON content type, static headers, then the bearer token."""
    headers = {"Content-Type": "application/json"}
    headers.update(static_headers)

    if access_token is not None:
        headers["Authorization"] = f"Bearer {access_token}"

    return headers


@contextmanager
def translate_transport_errors() -> Iterator[None]:
    """Surface network-level httpx failures as TransportError."""
    try:
        yield
    except httpx.HTTPError as e:
        raise TransportError(str(e) or type(e).__name__) from e


def handle_response(response: httpx.Response) -> Any:
    """Process HTTP response, raising TransportError for non-2xx statuses."""
    if not 200 <= response.status_code < 300:
        raise TransportError(
            message=response.text or "Authentication service call failed",
            status_code=response.status_code,
            response=response,
        )

    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise InternalError("Response body is not valid JSON") from e


def parse_payload(factory: Callable[[Any], T], data: Any, what: str) -> T:
    """Turn a decoded body into a typed result, raising InternalError on mismatch."""
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InternalError(f"Unexpected {what} response: {e!r}") from e


def parse_session(data: Any) -> Session:
    return parse_payload(Session.from_dict, data, "session")


def parse_user(data: Any) -> User:
    return parse_payload(User.from_dict, data, "user")


def parse_user_list(data: Any) -> list[User]:
    """Accept either ``{"users": [...]}`` or a bare list of users."""
    items = data.get("users") if isinstance(data, dict) else data
    return parse_payload(lambda rows: [User.from_dict(row) for row in rows], items, "user list")
