import logging

from flask import Blueprint, current_app, jsonify, render_template, request, session
from werkzeug.exceptions import HTTPException

from .. import limiter
from ..captcha import verify_recaptcha
from ..errors import AlreadyProcessedError, MailDeliveryError, NotFoundError, ValidationError
from ..forms import PasswordRequestForm, VerifyPasswordForm
from ..gate import ClientGate
from ..smtp_test import send_test_email

access_bp = Blueprint("access", __name__, url_prefix="/api")
logger = logging.getLogger(__name__)


def _workflow():
    return current_app.extensions["portfolio.workflow"]


def _client_ip():
    ip_raw = request.headers.get("X-Forwarded-For", request.remote_addr) or ""
    return ip_raw.split(",")[0].strip() or None


def _user_agent():
    return (request.headers.get("User-Agent") or "")[:255] or None


def _json_type_errors(field_names):
    """Per-field errors for JSON values the forms cannot coerce; None if fine."""
    if not request.is_json:
        return None
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {"body": ["Expected a JSON object."]}
    errors = {
        name: ["Must be a string."]
        for name in field_names
        if payload.get(name) is not None and not isinstance(payload[name], str)
    }
    return errors or None


def _decision_page(status_code, title, heading, message, tone="ok", password=None):
    html = render_template(
        "decision.html",
        title=title,
        heading=heading,
        message=message,
        tone=tone,
        password=password,
    )
    return html, status_code


# ---------- ACCESS REQUEST ----------
@access_bp.route("/password-request", methods=["POST"])
@limiter.limit("10 per hour")
def password_request():
    type_errors = _json_type_errors(PasswordRequestForm.FIELD_NAMES)
    if type_errors:
        return jsonify({"success": False, "message": "Invalid field values", "errors": type_errors}), 400

    form = PasswordRequestForm()
    if not form.validate():
        return jsonify({
            "success": False,
            "message": form.error_message(),
            "errors": form.errors,
        }), 400

    payload = request.get_json(silent=True) or request.form
    captcha_ok = verify_recaptcha(
        payload.get("g-recaptcha-response"),
        current_app.config.get("RECAPTCHA_SECRET_KEY"),
        remote_ip=_client_ip(),
    )
    if not captcha_ok:
        return jsonify({"success": False, "message": "CAPTCHA verification failed"}), 400

    try:
        outcome = _workflow().submit(form.workflow_fields(), ip=_client_ip(), user_agent=_user_agent())
    except ValidationError as exc:
        return jsonify({"success": False, "message": exc.message, "errors": exc.details}), 400
    except Exception:
        logger.exception("Password request failed")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    if not outcome.delivery.sent:
        return jsonify({
            "success": False,
            "message": "Request received but email delivery failed",
        })

    return jsonify({
        "success": True,
        "message": "Request submitted successfully. You will be notified of the decision.",
    })


# ---------- OWNER: APPROVE / DECLINE ----------
@access_bp.route("/approve-request/<request_id>")
def approve_request(request_id):
    try:
        outcome = _workflow().approve(request_id)
    except NotFoundError:
        return _decision_page(404, "Not Found", "Request not found",
                              "This request does not exist or has already been cleaned up.", tone="error")
    except AlreadyProcessedError as exc:
        status = (exc.details or {}).get("status", "processed")
        return _decision_page(409, "Already Processed", "Request already processed",
                              f"This request was already {status}.", tone="error")
    except Exception:
        logger.exception("Approval failed for %s", request_id)
        return _decision_page(500, "Error", "Server Error",
                              "An error occurred while processing the request.", tone="error")

    req = outcome.request
    if outcome.delivery.sent:
        return _decision_page(
            200, "Request Approved", "Request Approved",
            f"Access has been granted to {req.name} ({req.email}). "
            "The temporary password has been sent to the requester.",
        )
    return _decision_page(
        200, "Request Approved", "Approved, email failed",
        f"Access was granted to {req.name} ({req.email}) but the password email "
        f"could not be sent: {outcome.delivery.error}. Share the password below directly.",
        tone="warning",
        password=outcome.password,
    )


@access_bp.route("/decline-request/<request_id>")
def decline_request(request_id):
    try:
        outcome = _workflow().decline(request_id)
    except NotFoundError:
        return _decision_page(404, "Not Found", "Request not found",
                              "This request does not exist or has already been cleaned up.", tone="error")
    except AlreadyProcessedError as exc:
        status = (exc.details or {}).get("status", "processed")
        return _decision_page(409, "Already Processed", "Request already processed",
                              f"This request was already {status}.", tone="error")
    except Exception:
        logger.exception("Decline failed for %s", request_id)
        return _decision_page(500, "Error", "Server Error",
                              "An error occurred while processing the request.", tone="error")

    req = outcome.request
    if outcome.delivery.sent:
        return _decision_page(
            200, "Request Declined", "Request Declined",
            f"Access has been denied to {req.name} ({req.email}). "
            "A decline notification has been sent to the requester.",
        )
    return _decision_page(
        200, "Request Declined", "Declined, email failed",
        f"The request from {req.name} ({req.email}) was declined but the notification "
        f"could not be sent: {outcome.delivery.error}.",
        tone="warning",
    )


# ---------- GATE ----------
@access_bp.route("/verify-password", methods=["POST"])
@limiter.limit("30 per minute")
def verify_password():
    if _json_type_errors(VerifyPasswordForm.FIELD_NAMES):
        return jsonify({"success": False, "message": "Password must be a string"}), 400

    form = VerifyPasswordForm()
    if not form.validate():
        return jsonify({"success": False, "message": "Password required"}), 400

    gate = ClientGate(_workflow().verify_password, session)
    try:
        response = gate.submit(form.password.data)
    except Exception:
        logger.exception("Password verification failed")
        return jsonify({"success": False, "message": "Internal server error"}), 500

    return jsonify({"success": response.success, "message": response.message})


@access_bp.route("/logout-gate", methods=["POST"])
def logout_gate():
    ClientGate(_workflow().verify_password, session).sign_out()
    return jsonify({"success": True, "message": "Signed out"})


# ---------- DIAGNOSTICS ----------
@access_bp.route("/test-email")
def test_email():
    mailer = current_app.extensions["portfolio.mailer"]
    try:
        send_test_email(mailer, current_app.config.get("OWNER_EMAIL"))
    except MailDeliveryError as exc:
        return jsonify({"success": False, "error": exc.message})
    except Exception as exc:
        logger.exception("Test email failed")
        return jsonify({"success": False, "error": str(exc)})
    return jsonify({"success": True, "message": "Test email sent successfully"})


# ---------- BOUNDARY ----------
@access_bp.errorhandler(Exception)
def unexpected_error(exc):
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error on %s", request.path)
    return jsonify({"success": False, "message": "Internal server error"}), 500
