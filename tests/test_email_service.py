"""Tests for AccountsEmailService."""

from unittest.mock import Mock

import pytest

from watch_actions.config.models import EmailSettings
from watch_actions.mail import (
    AccountsEmailService,
    AddressList,
    Authentication,
    DeliveryError,
    Email,
    EmailSent,
    Priority,
    Profile,
)


@pytest.fixture
def settings():
    return EmailSettings.model_validate(
        {
            "default_account": "work",
            "accounts": {
                "work": {
                    "smtp": {"host": "smtp.example.com", "user": "bot@example.com", "password": "pw"},
                    "sender_name": "Watch Alerts",
                },
                "relay": {
                    "smtp": {"host": "relay.internal", "port": 25, "use_tls": False},
                    "profile": "outlook",
                },
            },
        }
    )


@pytest.fixture
def smtp_client():
    return Mock()


@pytest.fixture
def service(settings, smtp_client):
    return AccountsEmailService(settings, smtp_client=smtp_client)


@pytest.fixture
def email():
    return Email(
        id="exec-1",
        to=AddressList.parse("a@example.com"),
        bcc=AddressList.parse("b@example.com"),
        subject="hi",
        text_body="body",
        priority=Priority.HIGH,
    )


def test_send_uses_default_account(service, smtp_client, email):
    sent = service.send(email)

    assert isinstance(sent, EmailSent)
    assert sent.account == "work"
    message, smtp_config = smtp_client.send.call_args.args
    assert smtp_config.host == "smtp.example.com"
    assert message["From"] == "Watch Alerts <bot@example.com>"
    assert smtp_client.send.call_args.kwargs["credentials"] == ("bot@example.com", "pw")
    assert smtp_client.send.call_args.kwargs["to_addrs"] == ["a@example.com", "b@example.com"]


def test_send_fills_sent_date(service, email):
    assert email.sent_date is None
    assert service.send(email).email.sent_date is not None


def test_send_as_named_account(service, smtp_client, email):
    sent = service.send_as(email, "relay")

    assert sent.account == "relay"
    message, smtp_config = smtp_client.send.call_args.args
    assert smtp_config.host == "relay.internal"
    assert message["From"] == "noreply@relay.internal"
    assert smtp_client.send.call_args.kwargs["credentials"] is None


def test_account_profile_used_when_none_given(service, smtp_client, email):
    service.send_as(email, "relay")
    message = smtp_client.send.call_args.args[0]
    assert message["Importance"] == "high"


def test_explicit_profile_wins(service, smtp_client, email):
    service.send_as(email, "relay", profile=Profile.STANDARD)
    assert smtp_client.send.call_args.args[0]["Importance"] is None


def test_action_credentials_override_account(service, smtp_client, email):
    service.send(email, auth=Authentication.of("other@example.com", "secret"))
    assert smtp_client.send.call_args.kwargs["credentials"] == ("other@example.com", "secret")


def test_redacted_credentials_cannot_send(service, smtp_client, email):
    with pytest.raises(DeliveryError, match="no password"):
        service.send(email, auth=Authentication(user="u", password=None))
    smtp_client.send.assert_not_called()


def test_unknown_account_raises(service, email):
    with pytest.raises(DeliveryError, match="unknown email account 'missing'"):
        service.send_as(email, "missing")


def test_no_default_account_raises(smtp_client, email):
    service = AccountsEmailService(EmailSettings(), smtp_client=smtp_client)
    with pytest.raises(DeliveryError):
        service.send(email)


def test_email_without_recipients_raises(service, smtp_client):
    with pytest.raises(DeliveryError, match="no recipients"):
        service.send(Email(id="exec-1", subject="nobody"))
    smtp_client.send.assert_not_called()


def test_smtp_errors_propagate(service, smtp_client, email):
    smtp_client.send.side_effect = DeliveryError("SMTP error")
    with pytest.raises(DeliveryError):
        service.send(email)


def test_send_is_logged(service, email, caplog):
    caplog.set_level("INFO")
    service.send(email)
    records = [r for r in caplog.records if getattr(r, "event", None) == "smtp.send"]
    assert records and records[0].account == "work"
