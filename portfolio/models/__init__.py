from .access_request import AccessRequest, APPROVED, DECLINED, PENDING, STATUSES
from .credential import TemporaryCredential, VerifyResult

__all__ = [
    "AccessRequest",
    "APPROVED",
    "DECLINED",
    "PENDING",
    "STATUSES",
    "TemporaryCredential",
    "VerifyResult",
]
