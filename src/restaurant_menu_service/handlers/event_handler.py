"""EventBridge handler for the scheduled birthday campaign."""

import logging
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from restaurant_menu_service.services.birthday_campaign_service import BirthdayCampaignService

logger = logging.getLogger(__name__)

SCHEDULED_EVENT_SOURCE = "aws.events"
SCHEDULED_EVENT_DETAIL_TYPE = "Scheduled Event"


class ScheduledEvent(BaseModel):
    """Model for EventBridge scheduled (cron) events.

    Attributes:
        source: Event source, "aws.events" for schedules
        detail_type: "Scheduled Event" for schedules
        time: When the schedule fired
    """

    model_config = ConfigDict(populate_by_name=True)

    source: str
    detail_type: str = Field(..., alias="detail-type")
    time: datetime

    @property
    def campaign_date(self) -> date:
        return self.time.date()


def parse_scheduled_event(event: dict[str, Any]) -> ScheduledEvent | None:
    """Parse an EventBridge event into a ScheduledEvent.

    Args:
        event: Raw EventBridge event dictionary

    Returns:
        ScheduledEvent if the event is a well-formed schedule event, None otherwise
    """
    try:
        scheduled = ScheduledEvent.model_validate(event)
    except (ValidationError, TypeError) as e:
        logger.error(f"Failed to parse EventBridge event: {e}")
        return None

    if (
        scheduled.source != SCHEDULED_EVENT_SOURCE
        or scheduled.detail_type != SCHEDULED_EVENT_DETAIL_TYPE
    ):
        logger.warning(f"Unsupported event type: {scheduled.source}/{scheduled.detail_type}")
        return None

    return scheduled


class CampaignEventHandler:
    """Runs the birthday campaign when the daily schedule fires."""

    def __init__(self, campaign_service: BirthdayCampaignService) -> None:
        """Initialize the event handler.

        Args:
            campaign_service: Service that sends the birthday greetings
        """
        self.campaign_service = campaign_service

    async def handle_scheduled_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Lambda-style handler for the schedule event.

        Args:
            event: EventBridge event dictionary

        Returns:
            Dictionary with statusCode and body
        """
        scheduled = parse_scheduled_event(event)
        if scheduled is None:
            return {
                "statusCode": 400,
                "body": "Invalid event format",
            }

        result = await self.campaign_service.run(scheduled.campaign_date)

        if not result.configured:
            return {
                "statusCode": 200,
                "body": "Birthday campaign skipped, WhatsApp settings not configured",
            }

        body = f"Birthday campaign sent {len(result.sent)} greetings, {len(result.failed)} failed"
        if result.failed and not result.sent:
            logger.error(body)
            return {"statusCode": 500, "body": body}

        logger.info(body)
        return {"statusCode": 200, "body": body}
