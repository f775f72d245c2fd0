"""Streamlit page checks, run headless with streamlit's AppTest."""
from streamlit.testing.v1 import AppTest

from conftest import FakeSupabase


class NoAuth:
    def get_session(self):
        return None


def test_empty_session_shows_warning(monkeypatch):
    client = FakeSupabase(errors={"questions": ConnectionError("offline")})
    client.auth = NoAuth()
    monkeypatch.setattr("db.get_supabase", lambda: client)
    monkeypatch.setenv("MOCKTEST_SESSION_SIZE", "0")

    at = AppTest.from_file("app.py")
    at.run()
    at.button[0].click().run()

    assert not at.exception
    assert at.warning[0].value == "No questions are available for this test."
