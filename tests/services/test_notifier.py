"""Invitee Notifier — tests for message building, SMTP delivery and notifier selection.

Tests cover:
    - Accept link and expiry wording in the mail body
    - SMTP session: STARTTLS, login only with credentials, one message sent
    - get_notifier() falls back to LogOnlyNotifier without SMTP settings
"""

import pytest

from taskboard.config import Settings
from taskboard.infrastructure import notifier as notifier_module
from taskboard.infrastructure.notifier import (
    LogOnlyNotifier,
    SmtpInviteeNotifier,
    build_invitation_message,
    get_notifier,
)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls: list[str] = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(f"login:{user}")

    def send_message(self, message):
        self.messages.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(notifier_module.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _settings(**overrides) -> Settings:
    values = {
        "smtp_host": "smtp.example.com",
        "smtp_from": "boards@example.com",
        "app_base_url": "https://boards.example.com/",
    }
    values.update(overrides)
    return Settings(**values)


def test_message_carries_accept_link():
    message = build_invitation_message(
        "boards@example.com", "guest@example.com", "Launch plan",
        "https://boards.example.com/invitations/abc", 7,
    )
    assert message["To"] == "guest@example.com"
    assert "Launch plan" in message["Subject"]
    body = message.get_content()
    assert "https://boards.example.com/invitations/abc" in body
    assert "expire in 7 days" in body


def test_accept_url_strips_trailing_slash():
    smtp_notifier = SmtpInviteeNotifier(_settings())
    assert smtp_notifier.accept_url("tok") == "https://boards.example.com/invitations/tok"


async def test_send_invitation_with_credentials(fake_smtp):
    smtp_notifier = SmtpInviteeNotifier(_settings(smtp_user="mailer", smtp_password="pw"))
    await smtp_notifier.send_invitation("guest@example.com", "Launch plan", "tok123")

    (session,) = fake_smtp.instances
    assert (session.host, session.port) == ("smtp.example.com", 587)
    assert session.calls == ["starttls", "login:mailer", "quit"]
    (message,) = session.messages
    assert "/invitations/tok123" in message.get_content()


async def test_send_invitation_without_credentials_or_tls(fake_smtp):
    smtp_notifier = SmtpInviteeNotifier(_settings(smtp_starttls=False))
    await smtp_notifier.send_invitation("guest@example.com", "Launch plan", "tok")
    assert fake_smtp.instances[0].calls == ["quit"]


async def test_send_failure_propagates(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no relay")

    monkeypatch.setattr(notifier_module.smtplib, "SMTP", refuse)
    with pytest.raises(ConnectionRefusedError):
        await SmtpInviteeNotifier(_settings()).send_invitation("g@example.com", "B", "t")


async def test_log_only_notifier_never_logs_token(caplog):
    with caplog.at_level("INFO", logger="taskboard.infrastructure.notifier"):
        await LogOnlyNotifier().send_invitation("guest@example.com", "Launch plan", "secret-token")
    assert "Launch plan" in caplog.text
    assert "secret-token" not in caplog.text


def test_get_notifier_without_smtp_settings():
    assert isinstance(get_notifier(), LogOnlyNotifier)


def test_get_notifier_with_smtp_settings(monkeypatch):
    monkeypatch.setattr(notifier_module, "get_settings", lambda: _settings())
    assert isinstance(get_notifier(), SmtpInviteeNotifier)
