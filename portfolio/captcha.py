# portfolio/captcha.py
import logging

import requests

logger = logging.getLogger(__name__)

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


def verify_recaptcha(response_token, secret_key, remote_ip=None, timeout=10):
    """Check a reCAPTCHA response with Google. No secret configured means no check."""
    if not secret_key:
        return True
    if not response_token:
        return False

    data = {"secret": secret_key, "response": response_token}
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        result = requests.post(VERIFY_URL, data=data, timeout=timeout).json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("reCAPTCHA verification unavailable: %s", exc)
        return False

    return bool(result.get("success"))
