# portfolio/mailer.py
import os
import smtplib
import ssl
from dataclasses import dataclass
from email.header import Header
from email.utils import formataddr

from .errors import MailDeliveryError


@dataclass(frozen=True)
class MailMessage:
    to: str
    subject: str
    body: str


def _smtp_config():
    return {
        "host": os.getenv("SMTP_HOST"),
        "port": int(os.getenv("SMTP_PORT", "587")),
        "user": os.getenv("SMTP_USERNAME"),
        "password": os.getenv("SMTP_PASSWORD"),
        "sender": os.getenv("SMTP_FROM"),
        "alias": os.getenv("SMTP_FROM_ALIAS"),
        "use_tls": os.getenv("SMTP_USE_TLS", "true").lower() != "false",
    }


class SMTPMailer:
    """Mail capability backed by smtplib.

    send() either returns normally or raises MailDeliveryError. There is
    no timeout beyond smtplib's own, so a slow provider stalls the caller.
    """

    def __init__(self, config=None):
        self.config = config or _smtp_config()

    @property
    def sender(self):
        return self.config.get("sender")

    def is_configured(self) -> bool:
        cfg = self.config
        return all([cfg.get("host"), cfg.get("port"), cfg.get("user"), cfg.get("password"), cfg.get("sender")])

    def _format(self, message: MailMessage) -> str:
        cfg = self.config
        from_header = cfg["sender"]
        if cfg.get("alias"):
            from_header = formataddr((cfg["alias"], cfg["sender"]), charset="utf-8")

        subject = message.subject
        if not subject.isascii():
            subject = Header(subject, "utf-8").encode(linesep="\r\n")

        # headers stay 7-bit; only the body carries raw utf-8
        return (
            f"From: {from_header}\r\n"
            f"To: {message.to}\r\n"
            f"Subject: {subject}\r\n"
            "MIME-Version: 1.0\r\n"
            "Content-Type: text/plain; charset=utf-8\r\n"
            "Content-Transfer-Encoding: 8bit\r\n"
            "\r\n"
            f"{message.body}"
        )

    def send(self, message: MailMessage) -> None:
        if not self.is_configured():
            raise MailDeliveryError("SMTP not configured")

        cfg = self.config
        raw = self._format(message)
        try:
            context = ssl.create_default_context()
            with smtplib.SMTP(cfg["host"], cfg["port"]) as server:
                if cfg.get("use_tls", True):
                    server.starttls(context=context)
                server.login(cfg["user"], cfg["password"])
                server.sendmail(cfg["sender"], [message.to], raw.encode("utf-8"))
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(str(exc)) from exc
