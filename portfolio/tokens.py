# portfolio/tokens.py
import secrets

REQUEST_ID_BYTES = 16
PASSWORD_BYTES = 8


def new_id() -> str:
    """Unguessable request identifier (32 hex chars)."""
    return secrets.token_hex(REQUEST_ID_BYTES)


def new_password() -> str:
    """Human-typable one-time code, e.g. '9F2C01AB77E4D3C0'."""
    return secrets.token_hex(PASSWORD_BYTES).upper()
