"""Tests for CLI entrypoint behavior."""

from unittest.mock import MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from gotrue_client import __version__
from gotrue_client.cli.credentials import load_session, save_state
from gotrue_client.cli.main import app
from gotrue_client.types import Session

runner = CliRunner()

BASE_URL = "http://localhost:9999"


def make_response(status_code=200, body=None, text=""):
    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = status_code
    mock_response.content = b"" if body is None else b"{...}"
    mock_response.json.return_value = body
    mock_response.text = text
    return mock_response


def session_payload(access_token="tok1"):
    return {
        "access_token": access_token,
        "refresh_token": "r1",
        "expires_in": 3600,
        "user": {"id": "user-1", "email": "a@example.com"},
    }


@pytest.fixture(autouse=True)
def _use_tmp_state(tmp_path, monkeypatch):
    state_path = tmp_path / ".gotrue" / "session.json"
    monkeypatch.setattr("gotrue_client.cli.credentials.get_state_path", lambda: state_path)
    monkeypatch.setattr("gotrue_client.cli.commands.auth.get_state_path", lambda: state_path)
    return state_path


def test_root_version_option():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"gotrue {__version__}"


def test_version_subcommand():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"gotrue {__version__}"


def test_root_help_describes_cli():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "GoTrue authentication server" in result.stdout
    assert "GOTRUE_URL" in result.stdout


class TestAuthCommands:
    def test_login_stores_session(self):
        with patch.object(httpx.Client, "post", return_value=make_response(200, session_payload())) as mock_post:
            result = runner.invoke(app, ["auth", "login", "a@example.com", "--password", "Abcd1234!", "--url", BASE_URL])

        assert result.exit_code == 0
        assert "Signed in as a@example.com" in result.stdout
        assert mock_post.call_args[1]["json"] == {"email": "a@example.com", "password": "Abcd1234!"}
        assert load_session().access_token == "tok1"

    def test_login_with_phone(self):
        with patch.object(httpx.Client, "post", return_value=make_response(200, session_payload())) as mock_post:
            result = runner.invoke(
                app, ["auth", "login", "+15555550100", "--phone", "--password", "pw", "--url", BASE_URL]
            )

        assert result.exit_code == 0
        assert mock_post.call_args[1]["json"] == {"phone": "+15555550100", "password": "pw"}

    def test_login_failure_stores_nothing(self):
        with patch.object(httpx.Client, "post", return_value=make_response(400, text="Invalid login credentials")):
            result = runner.invoke(app, ["auth", "login", "a@example.com", "--password", "wrong", "--url", BASE_URL])

        assert result.exit_code == 1
        assert "Sign in failed" in result.stdout
        assert load_session() is None

    def test_login_without_url_fails(self):
        result = runner.invoke(app, ["auth", "login", "a@example.com", "--password", "pw"])
        assert result.exit_code == 1
        assert "GOTRUE_URL" in result.stdout

    def test_api_key_env_is_sent(self, monkeypatch):
        monkeypatch.setenv("GOTRUE_API_KEY", "anon-key")
        monkeypatch.setenv("GOTRUE_URL", BASE_URL)

        with patch.object(httpx.Client, "post", return_value=make_response(200, session_payload())) as mock_post:
            result = runner.invoke(app, ["auth", "login", "a@example.com", "--password", "pw"])

        assert result.exit_code == 0
        assert mock_post.call_args[1]["headers"]["apikey"] == "anon-key"

    def test_status_not_signed_in(self):
        result = runner.invoke(app, ["auth", "status"])
        assert result.exit_code == 1
        assert "Not signed in" in result.stdout

    def test_status_signed_in(self):
        save_state(BASE_URL, Session.from_dict(session_payload()))
        result = runner.invoke(app, ["auth", "status"])
        assert result.exit_code == 0
        assert "a@example.com" in result.stdout

    def test_logout_signs_out_and_clears(self):
        save_state(BASE_URL, Session.from_dict(session_payload()))

        with patch.object(httpx.Client, "post", return_value=make_response(204)) as mock_post:
            result = runner.invoke(app, ["auth", "logout"])

        assert result.exit_code == 0
        assert mock_post.call_args[0][0] == f"{BASE_URL}/logout"
        assert mock_post.call_args[1]["headers"]["Authorization"] == "Bearer tok1"
        assert load_session() is None

    def test_logout_rejected_keeps_session(self):
        save_state(BASE_URL, Session.from_dict(session_payload()))

        with patch.object(httpx.Client, "post", return_value=make_response(500, text="boom")):
            result = runner.invoke(app, ["auth", "logout"])

        assert result.exit_code == 1
        assert load_session() is not None

    def test_refresh_persists_new_session(self):
        save_state(BASE_URL, Session.from_dict(session_payload("tok1")))

        with patch.object(httpx.Client, "post", return_value=make_response(200, session_payload("tok2"))):
            result = runner.invoke(app, ["auth", "refresh"])

        assert result.exit_code == 0
        assert load_session().access_token == "tok2"


class TestUserCommands:
    def test_show_requires_session(self):
        result = runner.invoke(app, ["user", "show", "--url", BASE_URL])
        assert result.exit_code == 1
        assert "Not signed in" in result.stdout

    def test_update_rejects_invalid_json(self):
        save_state(BASE_URL, Session.from_dict(session_payload()))
        result = runner.invoke(app, ["user", "update", "--data", "{not json"])
        assert result.exit_code == 2

    def test_update_sends_metadata(self):
        save_state(BASE_URL, Session.from_dict(session_payload()))
        body = {"id": "user-1", "email": "a@example.com", "user_metadata": {"plan": "pro"}}

        with patch.object(httpx.Client, "put", return_value=make_response(200, body)) as mock_put:
            result = runner.invoke(app, ["user", "update", "--data", '{"plan": "pro"}'])

        assert result.exit_code == 0
        assert mock_put.call_args[1]["json"] == {"data": {"plan": "pro"}}


class TestAdminCommands:
    def test_list_requires_service_token(self):
        result = runner.invoke(app, ["admin", "list", "--url", BASE_URL])
        assert result.exit_code == 1
        assert "GOTRUE_SERVICE_TOKEN" in result.stdout

    def test_list_users(self, monkeypatch):
        monkeypatch.setenv("GOTRUE_SERVICE_TOKEN", "service-role")
        body = {"users": [{"id": "u1", "email": "a@example.com"}]}

        with patch.object(httpx.Client, "get", return_value=make_response(200, body)) as mock_get:
            result = runner.invoke(app, ["admin", "list", "--query", "?page=2", "--url", BASE_URL])

        assert result.exit_code == 0
        assert "u1" in result.stdout
        assert mock_get.call_args[0][0] == f"{BASE_URL}/admin/users?page=2"
        assert mock_get.call_args[1]["headers"]["Authorization"] == "Bearer service-role"

    def test_delete_with_yes(self, monkeypatch):
        monkeypatch.setenv("GOTRUE_SERVICE_TOKEN", "service-role")

        with patch.object(httpx.Client, "delete", return_value=make_response(200, {})) as mock_delete:
            result = runner.invoke(app, ["admin", "delete", "u1", "--yes", "--url", BASE_URL])

        assert result.exit_code == 0
        assert mock_delete.call_args[0][0] == f"{BASE_URL}/admin/users/u1"
