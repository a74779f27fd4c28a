"""Session lookup."""

from .base import EXPECTED_GET_STATUS, ResourceService, resource_path
from ..common.http import RetryingRequestClient

SESSIONS = "sessions"


class SessionsService(ResourceService):
    """Resolve the session the client is authenticated with."""

    def __init__(self, client: RetryingRequestClient, session_id: str):
        super().__init__(client)
        self.session_id = session_id

    def get(self) -> dict:
        """Return ``{"userId": ..., "sessionId": ...}`` for the current session."""
        return self._request_entity(
            "GET", resource_path(SESSIONS, self.session_id), EXPECTED_GET_STATUS, dict
        )
