"""Settings service for integration credentials."""

import logging
from datetime import UTC, datetime

from restaurant_menu_service.models.settings_models import WhatsAppSettings, WhatsAppSettingsUpdate
from restaurant_menu_service.repositories.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for reading and saving WhatsApp settings."""

    def __init__(self, settings_repository: SettingsRepository) -> None:
        """Initialize the SettingsService.

        Args:
            settings_repository: Repository for settings records
        """
        self.settings_repository = settings_repository

    async def get_whatsapp_settings(self) -> WhatsAppSettings | None:
        """Get the saved WhatsApp settings, or None if never saved."""
        return self.settings_repository.get_whatsapp_settings()

    async def save_whatsapp_settings(self, update: WhatsAppSettingsUpdate) -> WhatsAppSettings:
        """Save WhatsApp settings, replacing any previous values.

        Args:
            update: Validated credentials

        Returns:
            The stored settings
        """
        settings = self.settings_repository.save_whatsapp_settings(
            api_key=update.api_key,
            phone_number_id=update.phone_number_id,
            updated_at=datetime.now(UTC),
        )
        logger.info("WhatsApp settings saved")
        return settings
