"""Asynchronous session manager for the GoTrue client."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Any, Mapping

import httpx

from ._async import AsyncApi
from .config import DEFAULT_REFRESH_MARGIN_SECONDS, DEFAULT_TIMEOUT_SECONDS, resolve_base_url
from .exceptions import GoTrueError, InternalError, MissingRefreshTokenError, NotAuthenticatedError, TransportError
from .types import CredentialSelector, Session, User, UserAttributes, VerifyOtpParams

logger = logging.getLogger(__name__)


class AsyncGoTrueClient:
    """Asynchronous client holding at most one authenticated session.

    Example:
        >>> import asyncio
        >>> from gotrue_client import AsyncGoTrueClient, Email
        >>>
        >>> async def main():
        ...     async with AsyncGoTrueClient("http://localhost:9999", auto_refresh_token=True) as client:
        ...         await client.sign_in(Email("a@example.com"), "Abcd1234!")
        ...         print(await client.get_user())
        >>>
        >>> asyncio.run(main())

    With ``auto_refresh_token`` enabled, every installed session schedules a
    background task that refreshes it ``refresh_margin`` seconds before it
    expires, or halfway through its lifetime if that is later. Sessions
    without ``expires_in`` are not refreshed. Signing out, installing another
    session or closing the client cancels that task.

    The session is not guarded by a lock: concurrent tasks that sign in, sign
    out or refresh on the same client must be serialized by the caller.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        auto_refresh_token: bool = False,
        refresh_margin: float = DEFAULT_REFRESH_MARGIN_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the async client.

        Args:
            url: Service base URL. If not provided, reads from the GOTRUE_URL
                environment variable.
            headers: Static headers sent with every request.
            timeout: Request timeout in seconds (default: 30).
            auto_refresh_token: Refresh sessions in the background before they expire.
            refresh_margin: Seconds before expiry at which the refresh runs (default: 60).
            http_client: Optional httpx.AsyncClient shared with other code.

        Raises:
            ConfigurationError: If no URL is provided or found in environment.
        """
        self.api = AsyncApi(resolve_base_url(url), headers=headers, timeout=timeout, http_client=http_client)
        self._session: Session | None = None
        self._auto_refresh_token = auto_refresh_token
        self._refresh_margin = refresh_margin
        self._refresh_task: asyncio.Task[None] | None = None

    @property
    def session(self) -> Session | None:
        """The current session, or None when signed out."""
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session is not None else None

    def set_session(self, session: Session) -> None:
        """Install a previously obtained session.

        Must be called from a running event loop when auto refresh is enabled.
        """
        self._install(session)

    async def sign_up(self, selector: CredentialSelector, password: str) -> Session:
        """Create an account and make its session current.

        Raises:
            TransportError: If the service rejects the request or is unreachable.
            InternalError: If the response is not a session.
        """
        session = await self.api.sign_up(selector, password)
        self._install(session)
        return session

    async def sign_in(self, selector: CredentialSelector, password: str) -> Session:
        """Sign in with a password and make the new session current.

        Raises:
            TransportError: If the credentials are rejected or the service is unreachable.
            InternalError: If the response is not a session.
        """
        session = await self.api.sign_in(selector, password)
        self._install(session)
        return session

    async def send_otp(self, selector: CredentialSelector, should_create_user: bool | None = None) -> bool:
        try:
            return await self.api.send_otp(selector, should_create_user)
        except TransportError as e:
            logger.warning("Sending one-time passcode failed: %s", e)
            return False

    async def verify_otp(self, params: VerifyOtpParams | Mapping[str, Any]) -> bool:
        try:
            return await self.api.verify_otp(params)
        except TransportError as e:
            logger.warning("One-time passcode verification failed: %s", e)
            return False

    async def sign_out(self) -> bool:
        """Sign out and forget the current session.

        Returns True without contacting the service when already signed out.
        On failure the session is kept and False is returned.
        """
        if self._session is None:
            return True

        try:
            await self.api.sign_out(self._session.access_token)
        except TransportError as e:
            logger.warning("Sign out failed: %s", e)
            return False

        self._clear()
        return True

    async def reset_password_for_email(self, email: str) -> bool:
        try:
            return await self.api.reset_password_for_email(email)
        except TransportError as e:
            logger.warning("Password recovery request failed: %s", e)
            return False

    def get_url_for_provider(self, provider: str) -> str:
        return self.api.get_url_for_provider(provider)

    async def get_user(self) -> User:
        """Fetch the signed-in user from the service.

        Raises:
            NotAuthenticatedError: If there is no current session.
        """
        return await self.api.get_user(self._require_session().access_token)

    async def update_user(self, attributes: UserAttributes | Mapping[str, Any]) -> User:
        """Update the signed-in user. The session is left as is.

        Raises:
            NotAuthenticatedError: If there is no current session.
            TransportError: If the service rejects the update.
        """
        return await self.api.update_user(attributes, self._require_session().access_token)

    async def refresh_session(self) -> Session:
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
            session = await self.api.refresh_access_token(current.refresh_token)
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
        if self._auto_refresh_token:
            self._cancel_refresh()
            if session.expires_in <= 0:
                logger.debug("Session has no lifetime; background refresh not scheduled")
                return
            self._refresh_task = asyncio.create_task(self._refresh_later(session))

    def _clear(self) -> None:
        self._session = None
        self._cancel_refresh()
        logger.debug("Cleared session")

    def _cancel_refresh(self) -> None:
        task = self._refresh_task
        self._refresh_task = None
        # A refresh that installs its own result must not cancel itself.
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    def _refresh_delay(self, session: Session) -> float:
        """Seconds to wait before refreshing ``session``.

        The refresh runs ``refresh_margin`` seconds before expiry, but never
        earlier than halfway through the remaining lifetime, so short-lived
        tokens are not refreshed back to back.
        """
        remaining = session.expires_at - time.time()
        return max(remaining - self._refresh_margin, remaining / 2, 0)

    async def _refresh_later(self, session: Session) -> None:
        await asyncio.sleep(self._refresh_delay(session))
        if self._session is not session:
            return
        try:
            await self.refresh_session()
        except GoTrueError as e:
            logger.warning("Background session refresh failed: %s", e)
        except Exception:
            logger.exception("Unexpected error during background session refresh")

    async def close(self) -> None:
        """Cancel any pending refresh and release the HTTP client resources."""
        task = self._refresh_task
        self._cancel_refresh()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await self.api.close()

    async def __aenter__(self) -> AsyncGoTrueClient:
        return self

    async def __aexit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        await self.close()
