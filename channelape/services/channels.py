"""Channel operations."""

import logging

from .base import EXPECTED_CREATE_STATUS, EXPECTED_GET_STATUS, ResourceService, resource_path
from ..common.normalize import normalize_channel
from ..models.channels import CreateChannelRequest

logger = logging.getLogger(__name__)

CHANNELS = "channels"


class ChannelsService(ResourceService):
    """Read and create channels."""

    def get(self, channel_id: str) -> dict:
        """Fetch one channel by id."""
        return self._request_entity(
            "GET", resource_path(CHANNELS, channel_id), EXPECTED_GET_STATUS, normalize_channel
        )

    def create(self, request: CreateChannelRequest) -> dict:
        """Create a channel; the API answers 201 with the new channel."""
        logger.info(f"Creating channel '{request.name}' for business {request.business_id}")
        return self._request_entity(
            "POST",
            resource_path(CHANNELS),
            EXPECTED_CREATE_STATUS,
            normalize_channel,
            json=request.to_body(),
        )
