from datetime import datetime, timedelta, timezone

import pytest

from portfolio import create_app
from portfolio.errors import MailDeliveryError
from portfolio.notifier import Notifier
from portfolio.stores import CredentialStore, RequestStore
from portfolio.sweeper import ExpirySweeper
from portfolio.workflow import AccessWorkflow

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=START):
        self.now = now
        self.on_next_read = None

    def __call__(self):
        callback, self.on_next_read = self.on_next_read, None
        if callback:
            callback()
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeMailer:
    sender = "owner@example.com"

    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, message):
        if self.fail_with:
            raise MailDeliveryError(self.fail_with)
        self.sent.append(message)


class EventRecorder:
    def __init__(self):
        self.events = []

    def __call__(self, event, **fields):
        self.events.append((event, fields))

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def events():
    return EventRecorder()


@pytest.fixture()
def request_store():
    return RequestStore()


@pytest.fixture()
def credential_store(clock):
    return CredentialStore(clock=clock)


@pytest.fixture()
def notifier(mailer, events):
    return Notifier(mailer, owner_email="owner@example.com", base_url="https://portfolio.test/", hook=events)


@pytest.fixture()
def workflow(request_store, credential_store, notifier, clock, events):
    return AccessWorkflow(request_store, credential_store, notifier, clock=clock, hook=events)


@pytest.fixture()
def sweeper(request_store, credential_store, clock, events, workflow):
    return ExpirySweeper(request_store, credential_store, clock=clock, hook=events, lock=workflow.decision_lock)


@pytest.fixture()
def app(clock, mailer, events):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "OWNER_EMAIL": "owner@example.com",
            "PUBLIC_BASE_URL": "https://portfolio.test",
            "SWEEPER_ENABLED": False,
            "RATELIMIT_ENABLED": False,
            "RECAPTCHA_SECRET_KEY": None,
            "MASTER_PASSWORD": None,
        },
        clock=clock,
        mailer=mailer,
        hook=events,
    )
    yield app
    app.extensions["portfolio.sweeper"].stop()


@pytest.fixture()
def client(app):
    return app.test_client()


VALID_FIELDS = {"name": "A", "email": "a@x.com", "reason": "eval"}
