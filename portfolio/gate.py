# portfolio/gate.py
# Server half of the password gate. The browser half lives in static/js/gate.js
# and mirrors the same flag in sessionStorage.

from dataclasses import dataclass

from .models import VerifyResult

SESSION_KEY = "portfolio_authenticated"

MESSAGES = {
    VerifyResult.VALID: "Password valid",
    VerifyResult.INVALID: "Invalid password",
    VerifyResult.EXPIRED: "Password expired",
}


@dataclass(frozen=True)
class GateResponse:
    success: bool
    message: str
    clear_input: bool = False
    refocus: bool = False


class ClientGate:
    """Tracks whether this browsing session has unlocked the main content.

    `session` is any mutable mapping (the Flask session in the app). The
    flag is only ever set after a `valid` verification and lives as long
    as the session cookie, which is not permanent.
    """

    def __init__(self, verify, session):
        self._verify = verify
        self._session = session
        self.is_password_visible = False

    @property
    def is_authenticated(self) -> bool:
        return self._session.get(SESSION_KEY) is True

    def submit(self, password) -> GateResponse:
        result = self._verify(password)
        if result is VerifyResult.VALID:
            self._session[SESSION_KEY] = True
            return GateResponse(success=True, message=MESSAGES[result])
        return GateResponse(
            success=False,
            message=MESSAGES.get(result, MESSAGES[VerifyResult.INVALID]),
            clear_input=True,
            refocus=True,
        )

    def toggle_password_visibility(self) -> bool:
        self.is_password_visible = not self.is_password_visible
        return self.is_password_visible

    def sign_out(self):
        self._session.pop(SESSION_KEY, None)
