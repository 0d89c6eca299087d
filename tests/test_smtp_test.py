import pytest

from portfolio import smtp_test
from portfolio.errors import MailDeliveryError


def test_send_test_email_to_explicit_recipient(mailer):
    assert smtp_test.send_test_email(mailer, "ops@example.com") == "ops@example.com"
    assert mailer.sent[0].subject == smtp_test.SUBJECT


def test_send_test_email_falls_back_to_sender(mailer, monkeypatch):
    monkeypatch.delenv("SMTP_TO", raising=False)
    monkeypatch.delenv("OWNER_EMAIL", raising=False)
    assert smtp_test.send_test_email(mailer) == mailer.sender


def test_send_test_email_propagates_failure(mailer):
    mailer.fail_with = "no route"
    with pytest.raises(MailDeliveryError):
        smtp_test.send_test_email(mailer, "ops@example.com")
