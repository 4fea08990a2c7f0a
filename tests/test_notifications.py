"""Tests for ledgerise.notifications with the HTTP call stubbed out."""

from typing import Any

import pytest
import requests

from ledgerise.domain.errors import NotificationError
from ledgerise.notifications import (
    API_URL,
    RESET_SUBJECT,
    NotificationSettings,
    render_password_reset,
    send_password_reset_email,
)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.payload = payload or {}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self) -> dict[str, Any]:
        return self.payload


class TestRenderPasswordReset:
    """Tests for render_password_reset."""

    def test_includes_link(self) -> None:
        text, html = render_password_reset("https://app.example.com/reset?token=abc")

        assert "Reset your password: https://app.example.com/reset?token=abc" in text
        assert 'href="https://app.example.com/reset?token=abc"' in html

    def test_escapes_url_in_html(self) -> None:
        _, html = render_password_reset('https://x.test/?a=1&b="2"')
        assert "&amp;" in html
        assert "&quot;" in html


class TestSendPasswordResetEmail:
    """Tests for send_password_reset_email."""

    def test_missing_api_key(self) -> None:
        with pytest.raises(NotificationError):
            send_password_reset_email("a@example.com", "https://x.test", NotificationSettings(from_email="me@x.test"))

    def test_missing_sender(self) -> None:
        with pytest.raises(NotificationError):
            send_password_reset_email("a@example.com", "https://x.test", NotificationSettings(api_key="key"))

    def test_posts_to_api(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict[str, Any]] = []

        def fake_post(url: str, **kwargs: Any) -> FakeResponse:
            calls.append({"url": url, **kwargs})
            return FakeResponse(payload={"id": "msg_123"})

        monkeypatch.setattr(requests, "post", fake_post)
        settings = NotificationSettings(api_key="re_key", from_email="Ledgerise <no-reply@x.test>")

        message_id = send_password_reset_email("a@example.com", "https://x.test/reset", settings)

        assert message_id == "msg_123"
        assert len(calls) == 1
        call = calls[0]
        assert call["url"] == API_URL
        assert call["headers"]["Authorization"] == "Bearer re_key"
        assert call["json"]["to"] == ["a@example.com"]
        assert call["json"]["from"] == "Ledgerise <no-reply@x.test>"
        assert call["json"]["subject"] == RESET_SUBJECT

    def test_http_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(requests, "post", lambda url, **kwargs: FakeResponse(status_code=422))
        settings = NotificationSettings(api_key="re_key", from_email="no-reply@x.test")

        with pytest.raises(requests.HTTPError):
            send_password_reset_email("a@example.com", "https://x.test/reset", settings)
