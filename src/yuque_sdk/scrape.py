"""Read the pieces of Yuque HTML pages the password client depends on.

Only two things are extracted: the ``window.appData`` global embedded in a
repository page, and the repository password form shown on a login wall.
"""

import json
import logging
import re
from urllib.parse import unquote, urljoin

from bs4 import BeautifulSoup

from yuque_sdk.models import BookState, CatalogEntry, PasswordForm

logger = logging.getLogger(__name__)

_APP_DATA_RE = re.compile(r'decodeURIComponent\("(.+?)"\)\)', re.DOTALL)
_APP_DATA_JSON_RE = re.compile(r"window\.appData\s*=\s*(\{.*\});?\s*$", re.DOTALL | re.MULTILINE)


def parse_app_data(html: str) -> dict | None:
    """Return the decoded ``window.appData`` object, or None if absent."""
    soup = BeautifulSoup(html, "lxml")
    for script in soup.find_all("script"):
        text = script.string or script.get_text()
        if not text or "appData" not in text:
            continue
        match = _APP_DATA_RE.search(text)
        try:
            if match:
                return json.loads(unquote(match.group(1)))
            match = _APP_DATA_JSON_RE.search(text)
            if match:
                return json.loads(match.group(1))
        except json.JSONDecodeError:
            logger.debug("appData script is not valid JSON", exc_info=True)
    return None


def parse_book_state(html: str) -> BookState:
    """Extract the book id and catalog from a repository page."""
    app_data = parse_app_data(html) or {}
    book = app_data.get("book")
    if not book:
        return BookState()
    catalog = [CatalogEntry.model_validate(item) for item in book.get("toc") or []]
    return BookState(has_book=True, book_id=book.get("id"), catalog=catalog)


def parse_password_form(html: str, base_url: str, namespace: str) -> PasswordForm | None:
    """Find the password input and its form; None if the page has neither."""
    soup = BeautifulSoup(html, "lxml")
    password_input = soup.select_one('input[type="password"]')
    form = password_input.find_parent("form") if password_input else None
    if password_input is None or form is None:
        return None

    hidden_fields: dict[str, str] = {}
    for hidden in form.select('input[type="hidden"]'):
        name = hidden.get("name")
        if name:
            hidden_fields[str(name)] = str(hidden.get("value") or "")

    action = str(form.get("action") or f"/{namespace}")
    method = str(form.get("method") or "post").lower()
    return PasswordForm(
        action=urljoin(base_url.rstrip("/") + "/", action),
        method=method,
        hidden_fields=hidden_fields,
        password_field=str(password_input.get("name") or "password"),
    )
