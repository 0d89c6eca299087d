# portfolio/notifier.py
from dataclasses import dataclass
from datetime import datetime

from .errors import MailDeliveryError
from .events import log_event
from .mailer import MailMessage
from .models import AccessRequest


@dataclass(frozen=True)
class Delivery:
    sent: bool
    error: str | None = None


def _fmt_time(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    return value.strftime("%Y-%m-%d %H:%M UTC")


class Notifier:
    """Formats the three workflow emails and hands each to the mail capability once."""

    def __init__(self, mailer, owner_email: str, base_url: str, hook=log_event, signature: str = "The portfolio team"):
        self.mailer = mailer
        self.owner_email = owner_email
        self.base_url = (base_url or "").rstrip("/")
        self.hook = hook
        self.signature = signature

    # ------------------------------------------------------
    # Templates
    # ------------------------------------------------------
    def approve_link(self, request_id: str) -> str:
        return f"{self.base_url}/api/approve-request/{request_id}"

    def decline_link(self, request_id: str) -> str:
        return f"{self.base_url}/api/decline-request/{request_id}"

    def owner_request_message(self, request: AccessRequest) -> MailMessage:
        body = (
            "New portfolio access request\n\n"
            f"Request ID: {request.id}\n"
            f"Name: {request.name}\n"
            f"Email: {request.email}\n"
            f"Company: {request.company or 'Not provided'}\n"
            f"Reason: {request.reason}\n"
            f"Other reason: {request.other_reason or 'N/A'}\n"
            f"Timestamp: {request.timestamp}\n"
            f"IP address: {request.ip or 'unknown'}\n"
            f"User agent: {request.user_agent or 'unknown'}\n\n"
            f"Approve: {self.approve_link(request.id)}\n"
            f"Decline: {self.decline_link(request.id)}\n"
        )
        return MailMessage(
            to=self.owner_email,
            subject="Portfolio Access Request - Action Required",
            body=body,
        )

    def approved_message(self, request: AccessRequest, password: str, expires_at: datetime | None) -> MailMessage:
        body = (
            f"Hello {request.name},\n\n"
            "Your request for portfolio access has been approved.\n"
            f"Temporary password: {password}\n"
            f"Expires: {_fmt_time(expires_at)}\n\n"
            "This password stops working when it expires.\n\n"
            f"Best regards,\n{self.signature}\n"
        )
        return MailMessage(to=request.email, subject="Portfolio Access Granted", body=body)

    def declined_message(self, request: AccessRequest) -> MailMessage:
        body = (
            f"Hello {request.name},\n\n"
            "Thank you for your interest in the portfolio. "
            "Unfortunately access cannot be granted at this time.\n"
            "If you have any questions, please feel free to reach out directly.\n\n"
            f"Best regards,\n{self.signature}\n"
        )
        return MailMessage(to=request.email, subject="Portfolio Access Request - Update", body=body)

    # ------------------------------------------------------
    # Delivery
    # ------------------------------------------------------
    def _deliver(self, kind: str, message: MailMessage, request_id: str) -> Delivery:
        try:
            self.mailer.send(message)
        except MailDeliveryError as exc:
            self.hook("mail_failed", kind=kind, request_id=request_id, error=exc.message)
            return Delivery(sent=False, error=exc.message)
        self.hook("mail_sent", kind=kind, request_id=request_id)
        return Delivery(sent=True)

    def notify_owner_of_request(self, request: AccessRequest) -> Delivery:
        return self._deliver("owner_request", self.owner_request_message(request), request.id)

    def notify_requester_approved(self, request: AccessRequest, password: str, expires_at: datetime | None = None) -> Delivery:
        return self._deliver("requester_approved", self.approved_message(request, password, expires_at), request.id)

    def notify_requester_declined(self, request: AccessRequest) -> Delivery:
        return self._deliver("requester_declined", self.declined_message(request), request.id)
