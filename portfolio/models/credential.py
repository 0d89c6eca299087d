# portfolio/models/credential.py

import enum
from dataclasses import dataclass
from datetime import datetime


class VerifyResult(str, enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TemporaryCredential:
    password: str
    owner_email: str
    expires_at: datetime
    linked_request: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def __repr__(self):
        # never echo the password itself
        return f"<TemporaryCredential {self.owner_email} expires={self.expires_at.isoformat()}>"
