"""Tests for the CLI session store."""

from __future__ import annotations

import json

import pytest

from gotrue_client.cli.credentials import clear_state, load_session, load_state, save_state, stored_url
from gotrue_client.types import Session


def make_session(access_token: str = "tok1") -> Session:
    return Session.from_dict(
        {
            "access_token": access_token,
            "refresh_token": "r1",
            "expires_in": 3600,
            "user": {"id": "user-1", "email": "a@example.com"},
        }
    )


class TestSessionStore:
    @pytest.fixture(autouse=True)
    def _use_tmp_state(self, tmp_path, monkeypatch):
        """Redirect the state path to a temp directory."""
        state_path = tmp_path / ".gotrue" / "session.json"
        monkeypatch.setattr("gotrue_client.cli.credentials.get_state_path", lambda: state_path)
        self.state_path = state_path
        self.state_dir = state_path.parent

    def test_save_and_load_round_trip(self):
        session = make_session()
        save_state("http://localhost:9999", session)
        assert load_session() == session
        assert stored_url() == "http://localhost:9999"

    def test_save_sets_file_permissions_0600(self):
        save_state("http://localhost:9999", make_session())
        assert self.state_path.stat().st_mode & 0o777 == 0o600

    def test_save_sets_directory_permissions_0700(self):
        save_state("http://localhost:9999", make_session())
        assert self.state_dir.stat().st_mode & 0o777 == 0o700

    def test_save_overwrites_existing(self):
        save_state("http://localhost:9999", make_session("old"))
        save_state("http://localhost:9999", make_session("new"))
        assert load_session().access_token == "new"

    def test_save_atomic_no_temp_files_left(self):
        save_state("http://localhost:9999", make_session())
        files = list(self.state_dir.iterdir())
        assert [f.name for f in files] == ["session.json"]

    def test_load_returns_none_for_missing_file(self):
        assert load_state() is None
        assert load_session() is None
        assert stored_url() is None

    def test_load_returns_none_for_corrupt_json(self):
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text("not valid json{{{")
        assert load_state() is None

    def test_load_session_ignores_unreadable_session(self):
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps({"url": "http://x", "session": {"refresh_token": "r"}}))
        assert load_session() is None
        assert stored_url() == "http://x"

    def test_clear_removes_file(self):
        save_state("http://localhost:9999", make_session())
        assert clear_state() is True
        assert not self.state_path.exists()

    def test_clear_when_missing(self):
        assert clear_state() is False
