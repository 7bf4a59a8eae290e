"""Main application entry point for the restaurant menu service.

This module wires repositories, services and the FastAPI application from
environment configuration for running the service locally or in a container.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from restaurant_menu_service.handlers.api_handler import create_app
from restaurant_menu_service.observability import configure_logging, setup_observability
from restaurant_menu_service.repositories.cart_repository import CartRepository
from restaurant_menu_service.repositories.customer_repository import CustomerRepository
from restaurant_menu_service.repositories.menu_repository import MenuItemRepository
from restaurant_menu_service.repositories.settings_repository import SettingsRepository
from restaurant_menu_service.services.birthday_campaign_service import BirthdayCampaignService
from restaurant_menu_service.services.cart_service import CartService
from restaurant_menu_service.services.catalog_service import MenuCatalogService
from restaurant_menu_service.services.customer_service import CustomerService
from restaurant_menu_service.services.settings_service import SettingsService
from restaurant_menu_service.services.whatsapp_client import (
    DEFAULT_API_VERSION,
    DEFAULT_BASE_URL,
    WhatsAppClient,
)

logger = logging.getLogger(__name__)

DEVELOPMENT_SESSION_SECRET = "dev-session-secret-change-me"


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)


def get_session_secret() -> str:
    """Session cookie signing key, falling back to a development key."""
    secret = os.getenv("SESSION_SECRET")
    if not secret:
        logger.warning("No SESSION_SECRET configured - using development key")
        return DEVELOPMENT_SESSION_SECRET
    return secret


def get_admin_password() -> str | None:
    """Admin password from configuration, None if admin login is disabled."""
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        logger.warning("No ADMIN_PASSWORD configured - admin login will answer 503")
        return None
    return password


def create_whatsapp_client(api_key: str, phone_number_id: str) -> WhatsAppClient:
    """Build a WhatsApp client for the stored credentials and configured API endpoint."""
    return WhatsAppClient(
        api_key=api_key,
        phone_number_id=phone_number_id,
        base_url=os.getenv("WHATSAPP_API_BASE_URL", DEFAULT_BASE_URL),
        api_version=os.getenv("WHATSAPP_API_VERSION", DEFAULT_API_VERSION),
    )


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing restaurant menu service...")

    dynamodb_resource = get_dynamodb_resource()

    menu_table = os.getenv("DYNAMODB_MENU_TABLE", "restaurant-menu-items")
    customers_table = os.getenv("DYNAMODB_CUSTOMERS_TABLE", "restaurant-customers")
    cart_table = os.getenv("DYNAMODB_CART_TABLE", "restaurant-cart-items")
    settings_table = os.getenv("DYNAMODB_SETTINGS_TABLE", "restaurant-settings")

    catalog_service = MenuCatalogService(
        menu_repository=MenuItemRepository(dynamodb_resource=dynamodb_resource, table_name=menu_table)
    )
    customer_service = CustomerService(
        customer_repository=CustomerRepository(
            dynamodb_resource=dynamodb_resource, table_name=customers_table
        )
    )
    cart_service = CartService(
        cart_repository=CartRepository(dynamodb_resource=dynamodb_resource, table_name=cart_table)
    )
    settings_service = SettingsService(
        settings_repository=SettingsRepository(
            dynamodb_resource=dynamodb_resource, table_name=settings_table
        )
    )

    logger.info(
        f"Repositories configured - menu: {menu_table}, customers: {customers_table}, "
        f"cart: {cart_table}, settings: {settings_table}"
    )

    campaign_service = BirthdayCampaignService(
        customer_service=customer_service,
        settings_service=settings_service,
        client_factory=create_whatsapp_client,
        template_name=os.getenv("WHATSAPP_BIRTHDAY_TEMPLATE", "birthday_greeting"),
        language_code=os.getenv("WHATSAPP_TEMPLATE_LANGUAGE", "en"),
    )

    app = create_app(
        catalog_service=catalog_service,
        customer_service=customer_service,
        cart_service=cart_service,
        settings_service=settings_service,
        campaign_service=campaign_service,
        admin_password=get_admin_password(),
        session_secret=get_session_secret(),
    )

    setup_observability(app)

    logger.info("Restaurant menu service initialized successfully")
    return app


# Skip wiring during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
