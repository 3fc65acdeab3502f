"""Typed values exchanged with the authentication service."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Email:
    """Identify an account by email address."""

    address: str

    def to_payload(self) -> dict[str, Any]:
        return {"email": self.address}


@dataclass(frozen=True)
class Phone:
    """Identify an account by phone number."""

    number: str

    def to_payload(self) -> dict[str, Any]:
        return {"phone": self.number}


CredentialSelector = Union[Email, Phone]


def selector_from(identifier: str, phone: bool = False) -> CredentialSelector:
    """Build a credential selector from a plain identifier string."""
    return Phone(identifier) if phone else Email(identifier)


@dataclass(frozen=True)
class User:
    """Identity record returned by sign-up, sign-in, /user and admin endpoints."""

    id: str
    aud: str | None = None
    role: str | None = None
    email: str | None = None
    phone: str | None = None
    email_confirmed_at: str | None = None
    phone_confirmed_at: str | None = None
    confirmed_at: str | None = None
    last_sign_in_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    app_metadata: dict[str, Any] = field(default_factory=dict)
    user_metadata: dict[str, Any] = field(default_factory=dict)
    identities: list[dict[str, Any]] = field(default_factory=list)

    @property
    def email_confirmed(self) -> bool:
        return self.email_confirmed_at is not None

    @property
    def phone_confirmed(self) -> bool:
        return self.phone_confirmed_at is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        """Build a User from a response body. Unknown keys are ignored.

        Raises:
            KeyError: If ``id`` is missing.
        """
        return cls(
            id=data["id"],
            aud=data.get("aud"),
            role=data.get("role"),
            # The service sends "" rather than null for an unset phone.
            email=data.get("email") or None,
            phone=data.get("phone") or None,
            email_confirmed_at=data.get("email_confirmed_at"),
            phone_confirmed_at=data.get("phone_confirmed_at"),
            confirmed_at=data.get("confirmed_at"),
            last_sign_in_at=data.get("last_sign_in_at"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            app_metadata=dict(data.get("app_metadata") or {}),
            user_metadata=dict(data.get("user_metadata") or {}),
            identities=list(data.get("identities") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "aud": self.aud,
            "role": self.role,
            "email": self.email,
            "phone": self.phone,
            "email_confirmed_at": self.email_confirmed_at,
            "phone_confirmed_at": self.phone_confirmed_at,
            "confirmed_at": self.confirmed_at,
            "last_sign_in_at": self.last_sign_in_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "app_metadata": dict(self.app_metadata),
            "user_metadata": dict(self.user_metadata),
            "identities": list(self.identities),
        }


@dataclass(frozen=True)
class Session:
    """One authenticated login: bearer token, refresh token and the user.

    A Session is never modified; a refresh produces a new Session.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    expires_at: int
    user: User
    token_type: str = "bearer"

    @property
    def expired(self) -> bool:
        return self.expires_within(0)

    def expires_within(self, seconds: float) -> bool:
        """Return True if the access token expires in less than ``seconds``."""
        return time.time() >= self.expires_at - seconds

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Session:
        """Build a Session from a token response.

        ``expires_at`` is computed from ``expires_in`` when the response omits it.

        Raises:
            KeyError: If ``access_token`` or ``user`` is missing.
        """
        expires_in = int(data.get("expires_in") or 0)
        expires_at = data.get("expires_at")
        if expires_at is None:
            expires_at = int(time.time()) + expires_in
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or "",
            expires_in=expires_in,
            expires_at=int(expires_at),
            user=User.from_dict(data["user"]),
            token_type=data.get("token_type") or "bearer",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
            "expires_at": self.expires_at,
            "user": self.user.to_dict(),
        }


@dataclass
class UserAttributes:
    """Fields a signed-in user may change on their own account."""

    email: str | None = None
    phone: str | None = None
    password: str | None = None
    data: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "email": self.email,
                "phone": self.phone,
                "password": self.password,
                "data": self.data,
            }
        )


@dataclass
class AdminUserAttributes:
    """Fields an administrator may set when creating or updating a user."""

    email: str | None = None
    phone: str | None = None
    password: str | None = None
    data: dict[str, Any] | None = None
    email_confirmed: bool | None = None
    phone_confirmed: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return _drop_none(
            {
                "email": self.email,
                "phone": self.phone,
                "password": self.password,
                "data": self.data,
                "email_confirmed": self.email_confirmed,
                "phone_confirmed": self.phone_confirmed,
            }
        )


@dataclass
class VerifyOtpParams:
    """Body of an OTP verification.

    ``type`` is the verification kind the service expects, e.g. "sms",
    "signup", "magiclink", "recovery", "invite" or "email_change".
    """

    type: str
    token: str
    selector: CredentialSelector
    redirect_to: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "token": self.token}
        payload.update(self.selector.to_payload())
        if self.redirect_to is not None:
            payload["redirect_to"] = self.redirect_to
        return payload


def to_payload(value: Any) -> dict[str, Any]:
    """Render a request dataclass or a plain mapping as a JSON body."""
    if isinstance(value, Mapping):
        return dict(value)
    to_payload_method = getattr(value, "to_payload", None)
    if callable(to_payload_method):
        return to_payload_method()
    raise TypeError(f"Cannot build a request body from {type(value).__name__}")


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}
