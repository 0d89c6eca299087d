from .credentials import CredentialStore
from .requests import RequestStore

__all__ = ["CredentialStore", "RequestStore"]
