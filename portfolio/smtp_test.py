# portfolio/smtp_test.py
# Diagnostic email, used by GET /api/test-email and runnable as
#   python -m portfolio.smtp_test
import os

from dotenv import load_dotenv

from .errors import MailDeliveryError
from .mailer import MailMessage, SMTPMailer

SUBJECT = "Test Email from Portfolio"
BODY = "This is a test email to verify the email configuration is working."


def send_test_email(mailer, to_email=None):
    """Send the fixed diagnostic message; raises MailDeliveryError on failure."""
    recipient = to_email or os.getenv("SMTP_TO") or os.getenv("OWNER_EMAIL") or mailer.sender
    if not recipient:
        raise MailDeliveryError("No recipient configured for test email")
    mailer.send(MailMessage(to=recipient, subject=SUBJECT, body=BODY))
    return recipient


def main():
    load_dotenv()
    mailer = SMTPMailer()
    print("[*] Sending test email...")
    try:
        recipient = send_test_email(mailer)
    except MailDeliveryError as e:
        print("[!] SMTP Error:", e.message)
        return 1
    print(f"[+] Success! Test email sent to {recipient}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
