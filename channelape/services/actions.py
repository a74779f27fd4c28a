"""Action operations: lookup and state transitions for long-running jobs."""

import logging

from .base import EXPECTED_GET_STATUS, ResourceService, resource_path
from ..common.normalize import normalize_action

logger = logging.getLogger(__name__)

ACTIONS = "actions"

COMPLETE = "complete"
ERROR = "error"
HEALTH_CHECK = "healthcheck"


class ActionsService(ResourceService):
    """Read actions and move them through their lifecycle."""

    def get(self, action_id: str) -> dict:
        return self._request_entity(
            "GET", resource_path(ACTIONS, action_id), EXPECTED_GET_STATUS, normalize_action
        )

    def complete(self, action_id: str) -> dict:
        return self._transition(action_id, COMPLETE)

    def error(self, action_id: str) -> dict:
        return self._transition(action_id, ERROR)

    def update_health_check(self, action_id: str) -> dict:
        return self._transition(action_id, HEALTH_CHECK)

    def _transition(self, action_id: str, subresource: str) -> dict:
        logger.info(f"Marking action {action_id}: {subresource}")
        return self._request_entity(
            "PUT",
            resource_path(ACTIONS, action_id, subresource),
            EXPECTED_GET_STATUS,
            normalize_action,
        )
