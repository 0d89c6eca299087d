# portfolio/errors.py
from typing import Any, Mapping


class PortfolioError(Exception):
    code = "portfolio_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(PortfolioError):
    code = "validation_error"
    status_code = 400


class NotFoundError(PortfolioError):
    code = "not_found"
    status_code = 404


class AlreadyProcessedError(PortfolioError):
    code = "already_processed"
    status_code = 409


class MailDeliveryError(PortfolioError):
    code = "mail_delivery_failed"
    status_code = 502
