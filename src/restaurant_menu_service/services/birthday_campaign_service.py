"""WhatsApp birthday greeting campaign."""

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from restaurant_menu_service.models.customer_models import Customer, utc_today
from restaurant_menu_service.observability import traced
from restaurant_menu_service.observability.metrics import record_birthday_message
from restaurant_menu_service.services.customer_service import CustomerService
from restaurant_menu_service.services.settings_service import SettingsService
from restaurant_menu_service.services.whatsapp_client import WhatsAppClient

logger = logging.getLogger(__name__)

WhatsAppClientFactory = Callable[[str, str], WhatsAppClient]


@dataclass
class CampaignResult:
    """Outcome of one campaign run.

    Attributes:
        configured: False if no WhatsApp settings were saved and nothing was sent
        sent: Phone numbers whose greeting was accepted
        failed: Phone numbers whose greeting was rejected
    """

    configured: bool
    sent: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "configured": self.configured,
            "sent": len(self.sent),
            "failed": len(self.failed),
            "failedPhoneNumbers": list(self.failed),
        }


def is_birthday(date_of_birth: date, today: date) -> bool:
    """Check whether today is the birthday for a date of birth.

    Customers born on 29 February are greeted on 28 February in non-leap years.
    """
    if date_of_birth.month != today.month:
        return False
    if date_of_birth.day == today.day:
        return True
    return (
        date_of_birth.month == 2
        and date_of_birth.day == 29
        and today.day == 28
        and not calendar.isleap(today.year)
    )


class BirthdayCampaignService:
    """Sends a WhatsApp template greeting to every customer whose birthday is today."""

    def __init__(
        self,
        customer_service: CustomerService,
        settings_service: SettingsService,
        client_factory: WhatsAppClientFactory,
        template_name: str,
        language_code: str = "en",
    ) -> None:
        """Initialize the BirthdayCampaignService.

        Args:
            customer_service: Source of customer records
            settings_service: Source of the WhatsApp credentials
            client_factory: Builds a client from (api_key, phone_number_id)
            template_name: Approved WhatsApp template for the greeting
            language_code: Template language
        """
        self.customer_service = customer_service
        self.settings_service = settings_service
        self.client_factory = client_factory
        self.template_name = template_name
        self.language_code = language_code

    def select_recipients(self, customers: list[Customer], today: date) -> list[Customer]:
        return [
            customer
            for customer in customers
            if customer.date_of_birth is not None and is_birthday(customer.date_of_birth, today)
        ]

    @traced("campaign.birthday")
    async def run(self, today: date | None = None) -> CampaignResult:
        """Greet today's birthday customers.

        Each customer gets at most one attempt; failed sends are reported and
        not retried.

        Args:
            today: Date to evaluate birthdays against, defaults to the current UTC date

        Returns:
            CampaignResult with the sent and failed phone numbers
        """
        settings = await self.settings_service.get_whatsapp_settings()
        if settings is None:
            logger.warning("Birthday campaign skipped, WhatsApp settings not configured")
            return CampaignResult(configured=False)

        today = today or utc_today()
        recipients = self.select_recipients(await self.customer_service.list_all(), today)
        logger.info(f"Birthday campaign for {today.isoformat()}: {len(recipients)} recipients")

        client = self.client_factory(settings.api_key, settings.phone_number_id)
        result = CampaignResult(configured=True)
        for customer in recipients:
            success = await client.send_template_message(
                to=customer.phone_number,
                template_name=self.template_name,
                language_code=self.language_code,
                body_parameters=[customer.name],
            )
            record_birthday_message(success)
            if success:
                result.sent.append(customer.phone_number)
            else:
                result.failed.append(customer.phone_number)

        if result.failed:
            logger.warning(f"Birthday campaign: {len(result.failed)} greetings failed")
        return result
