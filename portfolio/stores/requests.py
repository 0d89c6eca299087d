# portfolio/stores/requests.py

import threading
from dataclasses import replace
from datetime import datetime

from ..models import AccessRequest


class RequestStore:
    """In-memory access requests keyed by request id.

    Nothing is persisted; a restart drops every request.
    """

    def __init__(self):
        self._requests: dict[str, AccessRequest] = {}
        self._lock = threading.Lock()

    def put(self, request: AccessRequest) -> None:
        with self._lock:
            self._requests[request.id] = request

    def get(self, request_id: str) -> AccessRequest | None:
        with self._lock:
            return self._requests.get(request_id)

    def update(self, request_id: str, **patch) -> AccessRequest | None:
        """Replace fields on a stored request; None when the id is unknown."""
        with self._lock:
            current = self._requests.get(request_id)
            if current is None:
                return None
            updated = replace(current, **patch)
            self._requests[request_id] = updated
            return updated

    def update_if(self, request_id: str, expected_status: str, **patch) -> AccessRequest | None:
        """Like update(), but only while the stored status still matches."""
        with self._lock:
            current = self._requests.get(request_id)
            if current is None or current.status != expected_status:
                return None
            updated = replace(current, **patch)
            self._requests[request_id] = updated
            return updated

    def delete(self, request_id: str) -> bool:
        with self._lock:
            return self._requests.pop(request_id, None) is not None

    def list_older_than(self, cutoff: datetime) -> list[str]:
        with self._lock:
            return [rid for rid, req in self._requests.items() if req.created_at < cutoff]

    def __contains__(self, request_id):
        with self._lock:
            return request_id in self._requests

    def __len__(self):
        with self._lock:
            return len(self._requests)
