"""DynamoDB repository for integration settings.

Each integration keeps a single record in the settings table, keyed by
``settings_key``.
"""

import logging
from datetime import datetime

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_menu_service.models.settings_models import WHATSAPP_SETTINGS_KEY, WhatsAppSettings
from restaurant_menu_service.repositories.dynamodb_utils import DYNAMODB_ERRORS
from restaurant_menu_service.repositories.errors import StorageError

logger = logging.getLogger(__name__)


class SettingsRepository:
    """Repository for singleton settings records."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_whatsapp_settings(self) -> WhatsAppSettings | None:
        """Retrieve the stored WhatsApp settings.

        Returns:
            WhatsAppSettings if saved before, None otherwise

        Raises:
            StorageError: If the lookup fails
        """
        try:
            response = self.table.get_item(Key={"settings_key": WHATSAPP_SETTINGS_KEY})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to get WhatsApp settings: {e}")
            raise StorageError("Failed to get WhatsApp settings") from e

        if "Item" not in response:
            return None

        return WhatsAppSettings.from_dynamodb_item(response["Item"])

    def save_whatsapp_settings(
        self, api_key: str, phone_number_id: str, updated_at: datetime
    ) -> WhatsAppSettings:
        """Create or overwrite the WhatsApp settings, keeping the original created_at.

        Args:
            api_key: WhatsApp Business API access token
            phone_number_id: Sender phone number ID
            updated_at: Timestamp of the change

        Returns:
            WhatsAppSettings: The stored settings

        Raises:
            StorageError: If the write fails
        """
        timestamp = updated_at.isoformat()
        try:
            response = self.table.update_item(
                Key={"settings_key": WHATSAPP_SETTINGS_KEY},
                UpdateExpression=(
                    "SET api_key = :api_key, phone_number_id = :phone_number_id, "
                    "updated_at = :now, created_at = if_not_exists(created_at, :now)"
                ),
                ExpressionAttributeValues={
                    ":api_key": api_key,
                    ":phone_number_id": phone_number_id,
                    ":now": timestamp,
                },
                ReturnValues="ALL_NEW",
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to save WhatsApp settings: {e}")
            raise StorageError("Failed to save WhatsApp settings") from e

        return WhatsAppSettings.from_dynamodb_item(response["Attributes"])
