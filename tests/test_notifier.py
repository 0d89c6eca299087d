from datetime import timedelta

from portfolio.models import AccessRequest

from .conftest import START


def make_request():
    return AccessRequest(
        id="abc123",
        name="Ada",
        email="ada@x.com",
        reason="Hiring",
        company=None,
        created_at=START,
        timestamp="2025-03-01T12:00:00+00:00",
        ip="203.0.113.5",
        user_agent="pytest",
    )


def test_owner_email_has_fields_and_links(notifier, mailer):
    delivery = notifier.notify_owner_of_request(make_request())

    assert delivery.sent is True
    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message.to == "owner@example.com"
    assert "Action Required" in message.subject
    assert "Company: Not provided" in message.body
    assert "IP address: 203.0.113.5" in message.body
    assert "https://portfolio.test/api/approve-request/abc123" in message.body
    assert "https://portfolio.test/api/decline-request/abc123" in message.body


def test_approved_email_carries_password_and_expiry(notifier, mailer):
    notifier.notify_requester_approved(make_request(), "0123456789ABCDEF", START + timedelta(hours=72))

    message = mailer.sent[0]
    assert message.to == "ada@x.com"
    assert message.subject == "Portfolio Access Granted"
    assert "0123456789ABCDEF" in message.body
    assert "2025-03-04 12:00 UTC" in message.body


def test_declined_email_goes_to_requester(notifier, mailer):
    notifier.notify_requester_declined(make_request())

    message = mailer.sent[0]
    assert message.to == "ada@x.com"
    assert "Update" in message.subject
    assert "Hello Ada" in message.body


def test_failure_is_reported_not_retried(notifier, mailer, events):
    mailer.fail_with = "connection refused"

    delivery = notifier.notify_requester_declined(make_request())

    assert delivery.sent is False
    assert delivery.error == "connection refused"
    assert mailer.sent == []
    assert ("mail_failed", {"kind": "requester_declined", "request_id": "abc123", "error": "connection refused"}) in events.events
