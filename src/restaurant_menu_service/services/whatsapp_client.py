"""Client for the WhatsApp Business Cloud API.

Expected failures (rejected request, network error) are reported as a False
return value; the caller decides what to do with them.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v19.0"


class WhatsAppClient:
    """HTTP client that sends template messages from one business phone number."""

    def __init__(
        self,
        api_key: str,
        phone_number_id: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the WhatsApp client.

        Args:
            api_key: WhatsApp Business API access token
            phone_number_id: Sender phone number ID
            base_url: Graph API base URL
            api_version: Graph API version segment
            timeout_seconds: Per-request timeout
        """
        self.api_key = api_key
        self.phone_number_id = phone_number_id
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/{self.api_version}/{self.phone_number_id}/messages"

    def build_template_payload(
        self,
        to: str,
        template_name: str,
        language_code: str,
        body_parameters: list[str] | None = None,
    ) -> dict[str, Any]:
        """Build the JSON body for a template message.

        Args:
            to: Recipient phone number (digits, with country code)
            template_name: Approved template name
            language_code: Template language (e.g. "en")
            body_parameters: Text values for the template body placeholders

        Returns:
            dict: Request payload
        """
        template: dict[str, Any] = {
            "name": template_name,
            "language": {"code": language_code},
        }
        if body_parameters:
            template["components"] = [
                {
                    "type": "body",
                    "parameters": [{"type": "text", "text": value} for value in body_parameters],
                }
            ]

        return {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "template",
            "template": template,
        }

    async def send_template_message(
        self,
        to: str,
        template_name: str,
        language_code: str = "en",
        body_parameters: list[str] | None = None,
    ) -> bool:
        """Send a template message.

        Args:
            to: Recipient phone number
            template_name: Approved template name
            language_code: Template language
            body_parameters: Text values for the template body placeholders

        Returns:
            bool: True if the API accepted the message, False otherwise
        """
        payload = self.build_template_payload(to, template_name, language_code, body_parameters)
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.messages_url, json=payload, headers=headers)
                response.raise_for_status()
        except (httpx.HTTPStatusError, httpx.RequestError) as e:
            logger.error(f"Failed to send WhatsApp template {template_name}: {e}")
            return False

        logger.info(f"WhatsApp template {template_name} accepted")
        return True
