# portfolio/stores/credentials.py

import threading
from datetime import timedelta

from ..clock import utc_now
from ..models import TemporaryCredential, VerifyResult


class CredentialStore:
    """Temporary passwords keyed by the password value itself.

    Expired entries are evicted lazily on verify() and proactively by
    sweep_expired().
    """

    def __init__(self, clock=utc_now):
        self._clock = clock
        self._credentials: dict[str, TemporaryCredential] = {}
        self._lock = threading.Lock()

    def issue(self, password: str, owner_email: str, linked_request: str | None, ttl: timedelta, issued_at=None) -> TemporaryCredential:
        issued_at = issued_at or self._clock()
        credential = TemporaryCredential(
            password=password,
            owner_email=owner_email,
            expires_at=issued_at + ttl,
            linked_request=linked_request,
        )
        with self._lock:
            if password in self._credentials:
                raise ValueError("password already issued")
            self._credentials[password] = credential
        return credential

    def verify(self, password: str) -> VerifyResult:
        now = self._clock()
        with self._lock:
            credential = self._credentials.get(password)
            if credential is None:
                return VerifyResult.INVALID
            if credential.is_expired(now):
                del self._credentials[password]
                return VerifyResult.EXPIRED
            return VerifyResult.VALID

    def sweep_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [pw for pw, cred in self._credentials.items() if cred.is_expired(now)]
            for pw in expired:
                del self._credentials[pw]
        return len(expired)

    def get(self, password: str) -> TemporaryCredential | None:
        with self._lock:
            return self._credentials.get(password)

    def __contains__(self, password):
        with self._lock:
            return password in self._credentials

    def __len__(self):
        with self._lock:
            return len(self._credentials)
