# portfolio/workflow.py
# Access request -> approval/decline -> temporary password lifecycle.

import hmac
import threading
from dataclasses import dataclass
from datetime import timedelta

from . import tokens
from .clock import utc_now
from .errors import AlreadyProcessedError, NotFoundError, ValidationError
from .events import log_event
from .models import AccessRequest, APPROVED, DECLINED, PENDING, VerifyResult
from .notifier import Delivery

REQUIRED_FIELDS = ("name", "email", "reason")
DEFAULT_TTL = timedelta(hours=72)


@dataclass(frozen=True)
class SubmitOutcome:
    request_id: str
    delivery: Delivery


@dataclass(frozen=True)
class ApprovalOutcome:
    request: AccessRequest
    password: str
    delivery: Delivery


@dataclass(frozen=True)
class DeclineOutcome:
    request: AccessRequest
    delivery: Delivery


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class AccessWorkflow:
    """Orchestrates the request store, credential store and notifier.

    approve() and decline() check and transition a request under
    decision_lock, which the expiry sweeper also holds while purging, so a
    pending request reaches a terminal state exactly once. The credential
    is issued only after the transition succeeds. Email goes out after the
    lock is released; a failed email never undoes the state change, it is
    only reported on the outcome.
    """

    def __init__(
        self,
        requests,
        credentials,
        notifier,
        clock=utc_now,
        ttl: timedelta = DEFAULT_TTL,
        master_password: str | None = None,
        hook=log_event,
        new_id=tokens.new_id,
        new_password=tokens.new_password,
    ):
        self.requests = requests
        self.credentials = credentials
        self.notifier = notifier
        self.clock = clock
        self.ttl = ttl
        self.master_password = master_password or None
        self.hook = hook
        self._new_id = new_id
        self._new_password = new_password
        self.decision_lock = threading.Lock()

    # ------------------------------------------------------
    # Submission
    # ------------------------------------------------------
    def submit(self, fields, ip: str | None = None, user_agent: str | None = None) -> SubmitOutcome:
        fields = fields or {}
        missing = [name for name in REQUIRED_FIELDS if not _clean(fields.get(name))]
        if missing:
            raise ValidationError(
                "Missing required fields",
                details={"missing": missing},
            )

        now = self.clock()
        with self.decision_lock:
            request_id = self._new_id()
            while request_id in self.requests:
                request_id = self._new_id()

            request = AccessRequest(
                id=request_id,
                name=_clean(fields.get("name")),
                email=_clean(fields.get("email")),
                reason=_clean(fields.get("reason")),
                company=_clean(fields.get("company")),
                other_reason=_clean(fields.get("otherReason") or fields.get("other_reason")),
                timestamp=_clean(fields.get("timestamp")) or now.isoformat(),
                ip=ip,
                user_agent=user_agent,
                status=PENDING,
                created_at=now,
            )
            self.requests.put(request)

        self.hook("request_submitted", request_id=request_id)
        delivery = self.notifier.notify_owner_of_request(request)
        return SubmitOutcome(request_id=request_id, delivery=delivery)

    # ------------------------------------------------------
    # Decisions
    # ------------------------------------------------------
    def _pending_or_raise(self, request_id: str) -> AccessRequest:
        request = self.requests.get(request_id)
        if request is None:
            raise NotFoundError("Request not found", details={"request_id": request_id})
        if not request.is_pending():
            raise AlreadyProcessedError(
                "Request has already been processed",
                details={"request_id": request_id, "status": request.status},
            )
        return request

    def approve(self, request_id: str) -> ApprovalOutcome:
        with self.decision_lock:
            self._pending_or_raise(request_id)

            password = self._new_password()
            while password in self.credentials:
                password = self._new_password()

            approved_at = self.clock()
            request = self.requests.update_if(
                request_id,
                PENDING,
                status=APPROVED,
                approved_at=approved_at,
                issued_password=password,
            )
            if request is None:
                # removed or decided since the check above
                self._pending_or_raise(request_id)
            credential = self.credentials.issue(password, request.email, request.id, self.ttl, issued_at=approved_at)

        self.hook("request_approved", request_id=request_id, expires_at=credential.expires_at.isoformat())
        delivery = self.notifier.notify_requester_approved(request, password, credential.expires_at)
        return ApprovalOutcome(request=request, password=password, delivery=delivery)

    def decline(self, request_id: str) -> DeclineOutcome:
        with self.decision_lock:
            self._pending_or_raise(request_id)
            request = self.requests.update_if(request_id, PENDING, status=DECLINED, declined_at=self.clock())
            if request is None:
                self._pending_or_raise(request_id)

        self.hook("request_declined", request_id=request_id)
        delivery = self.notifier.notify_requester_declined(request)
        return DeclineOutcome(request=request, delivery=delivery)

    # ------------------------------------------------------
    # Verification
    # ------------------------------------------------------
    def verify_password(self, password: str | None) -> VerifyResult:
        password = (password or "").strip()
        if not password:
            return VerifyResult.INVALID

        if self.master_password and hmac.compare_digest(password.encode("utf-8"), self.master_password.encode("utf-8")):
            self.hook("master_password_used")
            return VerifyResult.VALID

        result = self.credentials.verify(password)
        self.hook("password_verified", result=result.value)
        return result
