"""Stateless transport for the authentication service (sync)."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlencode

import httpx

from .._http import (
    build_headers,
    handle_response,
    parse_session,
    parse_user,
    translate_transport_errors,
)
from ..config import DEFAULT_TIMEOUT_SECONDS, sanitize_base_url
from ..types import CredentialSelector, Session, User, UserAttributes, VerifyOtpParams, to_payload
from .admin import AdminNamespace


class Api:
    """One method per remote endpoint. Holds no session state.

    Example:
        >>> from gotrue_client import Api, Email
        >>> api = Api("http://localhost:9999").insert_header("apikey", "anon-key")
        >>> session = api.sign_in(Email("a@example.com"), "Abcd1234!")
        >>> api.get_user(session.access_token)

    Admin endpoints live under ``api.admin``; they expect an admin-scoped
    credential in the static headers.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: Service base URL, e.g. "http://localhost:9999".
            headers: Static headers sent with every request (e.g. an API gateway key).
            timeout: Request timeout in seconds (default: 30).
            http_client: Optional httpx.Client to use instead of creating one.
                A client passed in is not closed by ``close()``.
        """
        self._base_url = sanitize_base_url(base_url)
        self._headers: dict[str, str] = dict(headers or {})
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(timeout=timeout)

        self.admin = AdminNamespace(self._client, self._base_url, self._headers)

    @property
    def base_url(self) -> str:
        return self._base_url

    def insert_header(self, name: str, value: str) -> Api:
        """Add a static header sent with every request. Returns self for chaining."""
        self._headers[name] = value
        return self

    def sign_up(self, selector: CredentialSelector, password: str) -> Session:
        """Create a new account and return its first session.

        Args:
            selector: ``Email(...)`` or ``Phone(...)`` identifying the account.
            password: The new account's password.

        Raises:
            TransportError: On network failure or a non-2xx response.
            InternalError: If the response is not a session.
        """
        payload = {**selector.to_payload(), "password": password}
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/signup",
                headers=build_headers(self._headers),
                json=payload,
            )
        return parse_session(handle_response(response))

    def sign_in(self, selector: CredentialSelector, password: str) -> Session:
        """Sign in with a password (password grant)."""
        payload = {**selector.to_payload(), "password": password}
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/token?grant_type=password",
                headers=build_headers(self._headers),
                json=payload,
            )
        return parse_session(handle_response(response))

    def send_otp(self, selector: CredentialSelector, should_create_user: bool | None = None) -> bool:
        """Send a one-time passcode, creating the user if allowed."""
        payload: dict[str, Any] = {**selector.to_payload(), "should_create_user": should_create_user}
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/otp",
                headers=build_headers(self._headers),
                json=payload,
            )
        handle_response(response)
        return True

    def verify_otp(self, params: VerifyOtpParams | Mapping[str, Any]) -> bool:
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/verify",
                headers=build_headers(self._headers),
                json=to_payload(params),
            )
        handle_response(response)
        return True

    def sign_out(self, access_token: str) -> bool:
        """Revoke the refresh tokens belonging to ``access_token``."""
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/logout",
                headers=build_headers(self._headers, access_token),
            )
        handle_response(response)
        return True

    def reset_password_for_email(self, email: str) -> bool:
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/recover",
                headers=build_headers(self._headers),
                json={"email": email},
            )
        handle_response(response)
        return True

    def get_url_for_provider(self, provider: str) -> str:
        """Build the URL that starts an OAuth sign-in with ``provider``. No request is made."""
        return f"{self._base_url}/authorize?{urlencode({'provider': provider})}"

    def refresh_access_token(self, refresh_token: str) -> Session:
        """Exchange a refresh token for a new session."""
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/token?grant_type=refresh_token",
                headers=build_headers(self._headers),
                json={"refresh_token": refresh_token},
            )
        return parse_session(handle_response(response))

    def get_user(self, access_token: str) -> User:
        with translate_transport_errors():
            response = self._client.get(
                f"{self._base_url}/user",
                headers=build_headers(self._headers, access_token),
            )
        return parse_user(handle_response(response))

    def update_user(self, attributes: UserAttributes | Mapping[str, Any], access_token: str) -> User:
        """Update the user that owns ``access_token``.

        Args:
            attributes: New email, phone, password and/or ``data`` metadata.
            access_token: Bearer token of the user being updated.

        Returns:
            The updated User.
        """
        with translate_transport_errors():
            response = self._client.put(
                f"{self._base_url}/user",
                headers=build_headers(self._headers, access_token),
                json=to_payload(attributes),
            )
        return parse_user(handle_response(response))

    def close(self) -> None:
        """Release the underlying HTTP client resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Api:
        return self

    def __exit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        self.close()
