# portfolio/models/access_request.py

from dataclasses import dataclass
from datetime import datetime

PENDING = "pending"
APPROVED = "approved"
DECLINED = "declined"

STATUSES = (PENDING, APPROVED, DECLINED)


@dataclass(frozen=True)
class AccessRequest:
    id: str
    name: str
    email: str
    reason: str
    created_at: datetime
    timestamp: str
    company: str | None = None
    other_reason: str | None = None
    ip: str | None = None
    user_agent: str | None = None
    status: str = PENDING
    approved_at: datetime | None = None
    declined_at: datetime | None = None
    issued_password: str | None = None

    def is_pending(self):
        return (self.status or "").lower() == PENDING

    def __repr__(self):
        return f"<AccessRequest {self.id} {self.email} {self.status}>"
