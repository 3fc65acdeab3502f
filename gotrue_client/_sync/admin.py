"""Admin namespace for the GoTrue client (sync)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from .._http import build_headers, handle_response, parse_user, parse_user_list, translate_transport_errors
from ..types import AdminUserAttributes, User, to_payload

if TYPE_CHECKING:
    import httpx


class AdminNamespace:
    """Namespace for user administration.

    These endpoints take no per-call bearer token; the admin credential is
    expected among the static headers.
    """

    def __init__(self, client: httpx.Client, base_url: str, headers: Mapping[str, str]) -> None:
        self._client = client
        self._base_url = base_url
        # Shared with the owning Api so insert_header() reaches admin calls too.
        self._headers = headers

    def invite_user_by_email(self, email: str) -> User:
        """Send an invitation email and return the invited (unconfirmed) user."""
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/invite",
                headers=build_headers(self._headers),
                json={"email": email},
            )
        return parse_user(handle_response(response))

    def list_users(self, query: str | None = None) -> list[User]:
        """List users.

        Args:
            query: Raw query suffix appended verbatim, e.g. "?page=2&per_page=50".

        Returns:
            List of users.
        """
        endpoint = f"{self._base_url}/admin/users"
        if query:
            endpoint = f"{endpoint}{query}"
        with translate_transport_errors():
            response = self._client.get(endpoint, headers=build_headers(self._headers))
        return parse_user_list(handle_response(response))

    def get_user_by_id(self, user_id: str) -> User:
        with translate_transport_errors():
            response = self._client.get(
                f"{self._base_url}/admin/users/{user_id}",
                headers=build_headers(self._headers),
            )
        return parse_user(handle_response(response))

    def create_user(self, attributes: AdminUserAttributes | Mapping[str, Any]) -> User:
        with translate_transport_errors():
            response = self._client.post(
                f"{self._base_url}/admin/users",
                headers=build_headers(self._headers),
                json=to_payload(attributes),
            )
        return parse_user(handle_response(response))

    def update_user_by_id(self, user_id: str, attributes: AdminUserAttributes | Mapping[str, Any]) -> User:
        with translate_transport_errors():
            response = self._client.put(
                f"{self._base_url}/admin/users/{user_id}",
                headers=build_headers(self._headers),
                json=to_payload(attributes),
            )
        return parse_user(handle_response(response))

    def delete_user(self, user_id: str) -> bool:
        with translate_transport_errors():
            response = self._client.delete(
                f"{self._base_url}/admin/users/{user_id}",
                headers=build_headers(self._headers),
            )
        handle_response(response)
        return True
