"""Tests for the typed request and response values."""

import time

import pytest

from gotrue_client import (
    AdminUserAttributes,
    Email,
    Phone,
    Session,
    User,
    UserAttributes,
    VerifyOtpParams,
    selector_from,
)
from gotrue_client.types import to_payload


class TestCredentialSelector:
    def test_email_payload(self):
        assert Email("a@example.com").to_payload() == {"email": "a@example.com"}

    def test_phone_payload(self):
        assert Phone("+15555550100").to_payload() == {"phone": "+15555550100"}

    def test_selector_from(self):
        assert selector_from("a@example.com") == Email("a@example.com")
        assert selector_from("+15555550100", phone=True) == Phone("+15555550100")


class TestUser:
    def test_from_dict_ignores_unknown_keys(self):
        user = User.from_dict({"id": "u1", "email": "a@example.com", "factors": [], "is_anonymous": False})
        assert user.id == "u1"
        assert user.email == "a@example.com"
        assert user.user_metadata == {}

    def test_empty_phone_is_none(self):
        assert User.from_dict({"id": "u1", "phone": ""}).phone is None

    def test_confirmation_flags(self):
        user = User.from_dict({"id": "u1", "email_confirmed_at": "2024-01-01T00:00:00Z"})
        assert user.email_confirmed is True
        assert user.phone_confirmed is False

    def test_missing_id_raises(self):
        with pytest.raises(KeyError):
            User.from_dict({"email": "a@example.com"})


class TestSession:
    def test_expires_at_computed_from_expires_in(self):
        before = int(time.time())
        session = Session.from_dict({"access_token": "tok", "expires_in": 3600, "user": {"id": "u1"}})
        assert before + 3600 <= session.expires_at <= int(time.time()) + 3600
        assert session.refresh_token == ""
        assert session.token_type == "bearer"
        assert not session.expired

    def test_expires_at_from_payload_is_kept(self):
        session = Session.from_dict(
            {"access_token": "tok", "refresh_token": "r", "expires_in": 3600, "expires_at": 1000, "user": {"id": "u1"}}
        )
        assert session.expires_at == 1000
        assert session.expired

    def test_expires_within(self):
        session = Session.from_dict({"access_token": "tok", "expires_in": 30, "user": {"id": "u1"}})
        assert session.expires_within(60)
        assert not session.expires_within(0)

    def test_missing_user_raises(self):
        with pytest.raises(KeyError):
            Session.from_dict({"access_token": "tok", "expires_in": 3600})

    def test_is_immutable(self):
        session = Session.from_dict({"access_token": "tok", "expires_in": 3600, "user": {"id": "u1"}})
        with pytest.raises(AttributeError):
            session.access_token = "other"

    def test_to_dict_restores_same_session(self):
        session = Session.from_dict(
            {"access_token": "tok", "refresh_token": "r", "expires_in": 3600, "user": {"id": "u1", "email": "a@x.io"}}
        )
        assert Session.from_dict(session.to_dict()) == session


class TestRequestBodies:
    def test_user_attributes_drop_unset_fields(self):
        assert UserAttributes(password="new").to_payload() == {"password": "new"}

    def test_admin_user_attributes(self):
        attributes = AdminUserAttributes(phone="+15555550100", phone_confirmed=True, data={"a": 1})
        assert attributes.to_payload() == {"phone": "+15555550100", "phone_confirmed": True, "data": {"a": 1}}

    def test_verify_otp_params(self):
        params = VerifyOtpParams(
            type="magiclink", token="abc", selector=Email("a@example.com"), redirect_to="https://app.example.com"
        )
        assert params.to_payload() == {
            "type": "magiclink",
            "token": "abc",
            "email": "a@example.com",
            "redirect_to": "https://app.example.com",
        }

    def test_to_payload_accepts_mapping(self):
        assert to_payload({"email": "a@example.com"}) == {"email": "a@example.com"}

    def test_to_payload_rejects_other_types(self):
        with pytest.raises(TypeError):
            to_payload(["email"])
