# portfolio/events.py
import logging

logger = logging.getLogger("portfolio.events")

WARNING_EVENTS = {"master_password_used", "mail_failed", "sweep_failed"}


def log_event(event: str, **fields):
    """Default observability hook: one structured log line per event."""
    level = logging.WARNING if event in WARNING_EVENTS else logging.INFO
    detail = " ".join(f"{key}={fields[key]}" for key in sorted(fields))
    logger.log(level, "event=%s %s", event, detail)


def null_hook(event: str, **fields):
    return None
