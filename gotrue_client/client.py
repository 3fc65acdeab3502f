"""Synchronous session manager for the GoTrue client."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ._sync import Api
from .config import DEFAULT_TIMEOUT_SECONDS, resolve_base_url
from .exceptions import InternalError, MissingRefreshTokenError, NotAuthenticatedError, TransportError
from .types import CredentialSelector, Session, User, UserAttributes, VerifyOtpParams

logger = logging.getLogger(__name__)


class GoTrueClient:
    """Synchronous client holding at most one authenticated session.

    Example:
        >>> from gotrue_client import Email, GoTrueClient, UserAttributes
        >>> with GoTrueClient("http://localhost:9999") as client:
        ...     client.sign_in(Email("a@example.com"), "Abcd1234!")
        ...     client.update_user(UserAttributes(data={"plan": "pro"}))
        ...     client.sign_out()

    Every call is delegated to ``client.api``; the client only decides which
    calls carry the current access token and keeps the session up to date.
    The session is not guarded by a lock: use one client per user, or
    serialize calls that change the session.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            url: Service base URL. If not provided, reads from the GOTRUE_URL
                environment variable.
            headers: Static headers sent with every request.
            timeout: Request timeout in seconds (default: 30).
            http_client: Optional httpx.Client shared with other code.

        Raises:
            ConfigurationError: If no URL is provided or found in environment.
        """
        self.api = Api(resolve_base_url(url), headers=headers, timeout=timeout, http_client=http_client)
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        """The current session, or None when signed out."""
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session is not None else None

    def set_session(self, session: Session) -> None:
        """Install a previously obtained session, e.g. one restored from disk."""
        self._install(session)

    def sign_up(self, selector: CredentialSelector, password: str) -> Session:
        """Create an account and make its session current.

        Raises:
            TransportError: If the service rejects the request or is unreachable.
            InternalError: If the response is not a session.
        """
        session = self.api.sign_up(selector, password)
        self._install(session)
        return session

    def sign_in(self, selector: CredentialSelector, password: str) -> Session:
        """Sign in with a password and make the new session current.

        Raises:
            TransportError: If the credentials are rejected or the service is unreachable.
            InternalError: If the response is not a session.
        """
        session = self.api.sign_in(selector, password)
        self._install(session)
        return session

    def send_otp(self, selector: CredentialSelector, should_create_user: bool | None = None) -> bool:
        try:
            return self.api.send_otp(selector, should_create_user)
        except TransportError as e:
            logger.warning("Sending one-time passcode failed: %s", e)
            return False

    def verify_otp(self, params: VerifyOtpParams | Mapping[str, Any]) -> bool:
        try:
            return self.api.verify_otp(params)
        except TransportError as e:
            logger.warning("One-time passcode verification failed: %s", e)
            return False

    def sign_out(self) -> bool:
        """Sign out and forget the current session.

        Returns True without contacting the service when already signed out.
        On failure the session is kept and False is returned.
        """
        if self._session is None:
            return True

        try:
            self.api.sign_out(self._session.access_token)
        except TransportError as e:
            logger.warning("Sign out failed: %s", e)
            return False

        self._clear()
        return True

    def reset_password_for_email(self, email: str) -> bool:
        try:
            return self.api.reset_password_for_email(email)
        except TransportError as e:
            logger.warning("Password recovery request failed: %s", e)
            return False

    def get_url_for_provider(self, provider: str) -> str:
        return self.api.get_url_for_provider(provider)

    def get_user(self) -> User:
        """Fetch the signed-in user from the service.

        Raises:
            NotAuthenticatedError: If there is no current session.
        """
        return self.api.get_user(self._require_session().access_token)

    def update_user(self, attributes: UserAttributes | Mapping[str, Any]) -> User:
        """Update the signed-in user. The session is left as is.

        Raises:
            NotAuthenticatedError: If there is no current session.
            TransportError: If the service rejects the update.
        """
        return self.api.update_user(attributes, self._require_session().access_token)

    def refresh_session(self) -> Session:
        """Exchange the current refresh token for a new session.

        Raises:
            NotAuthenticatedError: If there is no current session.
            MissingRefreshTokenError: If the session has no refresh token.
            InternalError: If the refresh fails; the current session is kept.
        """
        current = self._require_session()
        if not current.refresh_token:
            raise MissingRefreshTokenError("Current session has no refresh token")

        try:
            session = self.api.refresh_access_token(current.refresh_token)
        except TransportError as e:
            raise InternalError(f"Failed to refresh session: {e}") from e

        self._install(session)
        return session

    def _require_session(self) -> Session:
        if self._session is None:
            raise NotAuthenticatedError("Not signed in")
        return self._session

    def _install(self, session: Session) -> None:
        self._session = session
        logger.debug("Installed session for user %s", session.user.id)

    def _clear(self) -> None:
        self._session = None
        logger.debug("Cleared session")

    def close(self) -> None:
        """Release the underlying HTTP client resources."""
        self.api.close()

    def __enter__(self) -> GoTrueClient:
        return self

    def __exit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        self.close()
