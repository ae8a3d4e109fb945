"""Tests for the console and SMTP email senders."""

import logging
import smtplib

import pytest
from pydantic import ValidationError

from planner.config import Settings
from planner.services import email_sender
from planner.services.email_sender import ConsoleEmailSender, SmtpEmailSender, get_email_sender


class FakeSMTP:
    """Stands in for smtplib.SMTP and records what the sender did."""

    instances = []
    fail_with = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username))

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.calls.append(("send", message["To"], message["Subject"]))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(email_sender.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


class TestConsoleSender:
    def test_logs_instead_of_sending(self, caplog):
        with caplog.at_level(logging.INFO, logger="planner.services.email_sender"):
            assert ConsoleEmailSender().send("a@example.edu", "Hello", "Body text")
        assert "a@example.edu" in caplog.text
        assert "Body text" in caplog.text


class TestSmtpSender:
    def test_missing_host_fails_at_construction(self):
        with pytest.raises(ValueError):
            SmtpEmailSender(host="  ", from_address="noreply@example.edu")

    def test_missing_from_address_fails_at_construction(self, fake_smtp):
        with pytest.raises(ValueError):
            SmtpEmailSender(host="smtp.example.edu")
        assert fake_smtp.instances == []

    def test_sends_with_tls_and_login(self, fake_smtp):
        sender = SmtpEmailSender(
            host="smtp.example.edu", port=2525, username="bot", password="pw",
            from_address="noreply@example.edu",
        )
        assert sender.send("a@example.edu", "Subject line", "Body")

        client = fake_smtp.instances[0]
        assert (client.host, client.port) == ("smtp.example.edu", 2525)
        assert client.calls == ["starttls", ("login", "bot"), ("send", "a@example.edu", "Subject line")]

    def test_from_address_defaults_to_username(self):
        assert SmtpEmailSender(host="smtp.example.edu", username="bot@example.edu").from_address == "bot@example.edu"

    def test_relay_failure_returns_false(self, fake_smtp):
        fake_smtp.fail_with = smtplib.SMTPRecipientsRefused({"a@example.edu": (550, b"no")})
        sender = SmtpEmailSender(host="smtp.example.edu", from_address="noreply@example.edu", use_tls=False)
        assert sender.send("a@example.edu", "s", "b") is False


class TestSenderSelection:
    def test_development_uses_console(self, monkeypatch):
        monkeypatch.setattr(email_sender.settings, "ENVIRONMENT", "development")
        monkeypatch.setattr(email_sender.settings, "EMAIL_HOST", "smtp.example.edu")
        assert isinstance(get_email_sender(), ConsoleEmailSender)

    def test_blank_host_uses_console(self, monkeypatch):
        monkeypatch.setattr(email_sender.settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(email_sender.settings, "EMAIL_HOST", "  ")
        assert isinstance(get_email_sender(), ConsoleEmailSender)

    def test_production_with_host_uses_smtp(self, monkeypatch):
        monkeypatch.setattr(email_sender.settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(email_sender.settings, "EMAIL_HOST", "smtp.example.edu")
        monkeypatch.setattr(email_sender.settings, "EMAIL_FROM", "noreply@example.edu")
        sender = get_email_sender()
        assert isinstance(sender, SmtpEmailSender)
        assert sender.host == "smtp.example.edu"


class TestEmailSettings:
    def test_production_host_without_sender_address_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="production", EMAIL_HOST="smtp.example.edu", EMAIL_FROM="", EMAIL_USERNAME="")

    def test_username_is_enough_for_sender_address(self):
        cfg = Settings(ENVIRONMENT="production", EMAIL_HOST="smtp.example.edu", EMAIL_FROM="", EMAIL_USERNAME="bot@example.edu")
        assert cfg.EMAIL_HOST == "smtp.example.edu"

    def test_development_ignores_incomplete_smtp(self):
        cfg = Settings(ENVIRONMENT="development", EMAIL_HOST="smtp.example.edu", EMAIL_FROM="", EMAIL_USERNAME="")
        assert cfg.ENVIRONMENT == "development"
