"""Shared fixtures for the yuque-sdk tests."""

import json
from urllib.parse import quote

import pytest


@pytest.fixture(autouse=True)
def clean_yuque_env(monkeypatch):
    """Keep credentials from the developer's shell out of the tests."""
    for key in (
        "YUQUE_TOKEN",
        "YUQUE_USERNAME",
        "YUQUE_PASSWORD",
        "YUQUE_REPO_PASSWORD",
        "YUQUE_COOKIE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def book_page():
    """Build a repository page embedding ``window.appData`` the way Yuque does."""

    def build(book: dict | None) -> str:
        app_data = {"me": {"login": "someone"}}
        if book is not None:
            app_data["book"] = book
        encoded = quote(json.dumps(app_data))
        return (
            "<html><head><title>Repo</title></head><body><div id=\"root\"></div>"
            f'<script>window.appData = JSON.parse(decodeURIComponent("{encoded}"));</script>'
            "</body></html>"
        )

    return build


@pytest.fixture
def password_page():
    """A login wall page with a repository password form."""
    return """
    <html><body>
      <div class="lock">
        <form action="/user/repo/verify" method="POST" class="pwd-form">
          <input type="hidden" name="_csrf" value="csrf-token" />
          <input type="hidden" name="goto" value="/user/repo" />
          <input type="hidden" value="no-name" />
          <input type="password" name="pwd" placeholder="password" />
          <button type="submit">Enter</button>
        </form>
      </div>
    </body></html>
    """
