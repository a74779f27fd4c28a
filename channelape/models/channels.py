"""Channel domain types for the ChannelApe API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChannelSettings(BaseModel):
    """Per-channel sync settings."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    allow_create: bool = Field(default=False, alias="allowCreate")
    allow_read: bool = Field(default=True, alias="allowRead")
    allow_update: bool = Field(default=False, alias="allowUpdate")
    allow_delete: bool = Field(default=False, alias="allowDelete")
    disable_variants: bool = Field(default=False, alias="disableVariants")
    price_type: str = Field(default="retail", alias="priceType")
    update_fields: list[str] = Field(default_factory=list, alias="updateFields")


class CreateChannelRequest(BaseModel):
    """Body of a channel creation call."""

    model_config = ConfigDict(populate_by_name=True)

    business_id: str = Field(..., alias="businessId")
    integration_id: str = Field(..., alias="integrationId")
    name: str = Field(..., min_length=1)
    enabled: bool = True
    credentials: dict[str, str] = Field(default_factory=dict)
    settings: ChannelSettings = Field(default_factory=ChannelSettings)

    def to_body(self) -> dict[str, Any]:
        """JSON body using the API's camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")
