from flask import Blueprint, current_app, render_template, session

from ..gate import SESSION_KEY

site_bp = Blueprint("site", __name__)


@site_bp.route("/")
def home():
    gate_config = {
        "verifyUrl": "/api/verify-password",
        "requestUrl": "/api/password-request",
        "sessionKey": SESSION_KEY,
        "errorDisplayMs": 3000,
    }
    return render_template(
        "index.html",
        locked=session.get(SESSION_KEY) is not True,
        gate_config=gate_config,
        site_key=current_app.config.get("RECAPTCHA_SITE_KEY"),
    )


@site_bp.route("/status")
def status():
    return "Portfolio gate is running."
