"""Integration settings models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

WHATSAPP_SETTINGS_KEY = "whatsapp"


class WhatsAppSettings(BaseModel):
    """WhatsApp Business API credentials used for birthday greetings.

    Stored as a single record in the settings table.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    api_key: str = Field(..., description="WhatsApp Business API access token")
    phone_number_id: str = Field(..., description="Sender phone number ID")
    created_at: datetime = Field(..., description="When settings were first saved")
    updated_at: datetime = Field(..., description="When settings were last saved")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "WhatsAppSettings":
        """Create WhatsAppSettings from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            WhatsAppSettings: Parsed model instance
        """
        return cls(
            api_key=item["api_key"],
            phone_number_id=item["phone_number_id"],
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class WhatsAppSettingsUpdate(BaseModel):
    """Payload for saving WhatsApp settings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    api_key: str = Field(..., min_length=1)
    phone_number_id: str = Field(..., min_length=1)
