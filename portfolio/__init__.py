# portfolio/__init__.py

import logging
import os
from datetime import timedelta

from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from dotenv import load_dotenv

# ======================================================
# Load environment first
# ======================================================
load_dotenv()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per hour"],
    storage_uri="memory://"
)


def _env_bool(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def _configure_logging(level_name):
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        ))
        root.addHandler(handler)
    logging.getLogger("portfolio").setLevel(level)


def create_app(test_config=None, *, clock=None, mailer=None, hook=None):
    from portfolio.clock import utc_now
    from portfolio.events import log_event
    from portfolio.mailer import SMTPMailer
    from portfolio.notifier import Notifier
    from portfolio.stores import CredentialStore, RequestStore
    from portfolio.sweeper import ExpirySweeper
    from portfolio.workflow import AccessWorkflow

    app = Flask(__name__)

    # ==================================================
    # Security / Keys
    # ==================================================
    app.secret_key = os.getenv("SECRET_KEY", "REPLACE_WITH_A_SECURE_RANDOM_KEY")

    # ==================================================
    # Access workflow
    # ==================================================
    app.config["OWNER_EMAIL"] = os.getenv("OWNER_EMAIL") or os.getenv("SMTP_FROM")
    app.config["PUBLIC_BASE_URL"] = os.getenv("PUBLIC_BASE_URL", "http://localhost:3000")
    app.config["ACCESS_PASSWORD_TTL_HOURS"] = float(os.getenv("ACCESS_PASSWORD_TTL_HOURS", "72"))
    app.config["REQUEST_RETENTION_DAYS"] = float(os.getenv("REQUEST_RETENTION_DAYS", "7"))
    app.config["SWEEP_INTERVAL_SECONDS"] = float(os.getenv("SWEEP_INTERVAL_SECONDS", "3600"))
    app.config["SWEEPER_ENABLED"] = _env_bool("SWEEPER_ENABLED", True)
    # Bootstrap credential; off unless someone sets it on purpose.
    app.config["MASTER_PASSWORD"] = os.getenv("MASTER_PASSWORD") or None
    app.config["MAIL_SIGNATURE"] = os.getenv("MAIL_SIGNATURE", "The portfolio team")

    # ==================================================
    # reCAPTCHA
    # ==================================================
    app.config["RECAPTCHA_SITE_KEY"] = os.getenv("RECAPTCHA_SITE_KEY")
    app.config["RECAPTCHA_SECRET_KEY"] = os.getenv("RECAPTCHA_SECRET_KEY")

    # ==================================================
    # Session (gate flag lives until the browser closes)
    # ==================================================
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = _env_bool("SESSION_COOKIE_SECURE", False)

    # ==================================================
    # Rate limiting / logging
    # ==================================================
    app.config["RATELIMIT_ENABLED"] = _env_bool("RATELIMIT_ENABLED", True)
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")

    if test_config:
        app.config.update(test_config)
        if "SECRET_KEY" in test_config:
            app.secret_key = test_config["SECRET_KEY"]

    _configure_logging(app.config["LOG_LEVEL"])
    limiter.init_app(app)

    # ==================================================
    # Stores, notifier, workflow, sweeper
    # ==================================================
    clock = clock or utc_now
    hook = hook or log_event
    mailer = mailer or SMTPMailer()

    requests_store = RequestStore()
    credentials_store = CredentialStore(clock=clock)
    notifier = Notifier(
        mailer,
        owner_email=app.config["OWNER_EMAIL"],
        base_url=app.config["PUBLIC_BASE_URL"],
        hook=hook,
        signature=app.config["MAIL_SIGNATURE"],
    )
    workflow = AccessWorkflow(
        requests_store,
        credentials_store,
        notifier,
        clock=clock,
        ttl=timedelta(hours=app.config["ACCESS_PASSWORD_TTL_HOURS"]),
        master_password=app.config["MASTER_PASSWORD"],
        hook=hook,
    )
    sweeper = ExpirySweeper(
        requests_store,
        credentials_store,
        clock=clock,
        interval_seconds=app.config["SWEEP_INTERVAL_SECONDS"],
        retention=timedelta(days=app.config["REQUEST_RETENTION_DAYS"]),
        hook=hook,
        lock=workflow.decision_lock,
    )

    app.extensions["portfolio.mailer"] = mailer
    app.extensions["portfolio.workflow"] = workflow
    app.extensions["portfolio.sweeper"] = sweeper

    if app.config["MASTER_PASSWORD"]:
        app.logger.warning("MASTER_PASSWORD is set; it unlocks the gate without an approved request.")

    if app.config["SWEEPER_ENABLED"]:
        sweeper.start()

    # ==================================================
    # Blueprints
    # ==================================================
    from portfolio.routes.access import access_bp
    from portfolio.routes.site import site_bp

    app.register_blueprint(access_bp)
    app.register_blueprint(site_bp)

    # ==================================================
    # Security Headers
    # ==================================================
    @app.after_request
    def apply_security_headers(response):
        csp = (
            "default-src 'self'; "
            "img-src 'self' data:; "
            "script-src 'self' https://www.gstatic.com https://www.google.com; "
            "style-src 'self' 'unsafe-inline'; "
            "frame-src https://www.google.com; "
            "connect-src 'self';"
        )
        response.headers["Content-Security-Policy"] = csp
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    return app
