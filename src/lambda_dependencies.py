"""Cached dependency factory for the Lambda entry point.

Dependencies are created once per Lambda container and reused across warm
invocations.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from restaurant_menu_service.handlers.api_handler import create_app
from restaurant_menu_service.handlers.event_handler import CampaignEventHandler
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

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_catalog_service: MenuCatalogService | None = None
_customer_service: CustomerService | None = None
_cart_service: CartService | None = None
_settings_service: SettingsService | None = None
_campaign_service: BirthdayCampaignService | None = None
_event_handler: CampaignEventHandler | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_catalog_service() -> MenuCatalogService:
    """Create or retrieve cached menu catalog service."""
    global _catalog_service

    if _catalog_service is None:
        repository = MenuItemRepository(
            dynamodb_resource=get_dynamodb_resource(),
            table_name=os.getenv("DYNAMODB_MENU_TABLE", "restaurant-menu-items"),
        )
        _catalog_service = MenuCatalogService(menu_repository=repository)
        logger.info("Catalog service initialized")

    return _catalog_service


def get_customer_service() -> CustomerService:
    """Create or retrieve cached customer service."""
    global _customer_service

    if _customer_service is None:
        repository = CustomerRepository(
            dynamodb_resource=get_dynamodb_resource(),
            table_name=os.getenv("DYNAMODB_CUSTOMERS_TABLE", "restaurant-customers"),
        )
        _customer_service = CustomerService(customer_repository=repository)
        logger.info("Customer service initialized")

    return _customer_service


def get_cart_service() -> CartService:
    """Create or retrieve cached cart service."""
    global _cart_service

    if _cart_service is None:
        repository = CartRepository(
            dynamodb_resource=get_dynamodb_resource(),
            table_name=os.getenv("DYNAMODB_CART_TABLE", "restaurant-cart-items"),
        )
        _cart_service = CartService(cart_repository=repository)
        logger.info("Cart service initialized")

    return _cart_service


def get_settings_service() -> SettingsService:
    """Create or retrieve cached settings service."""
    global _settings_service

    if _settings_service is None:
        repository = SettingsRepository(
            dynamodb_resource=get_dynamodb_resource(),
            table_name=os.getenv("DYNAMODB_SETTINGS_TABLE", "restaurant-settings"),
        )
        _settings_service = SettingsService(settings_repository=repository)
        logger.info("Settings service initialized")

    return _settings_service


def create_whatsapp_client(api_key: str, phone_number_id: str) -> WhatsAppClient:
    return WhatsAppClient(
        api_key=api_key,
        phone_number_id=phone_number_id,
        base_url=os.getenv("WHATSAPP_API_BASE_URL", DEFAULT_BASE_URL),
        api_version=os.getenv("WHATSAPP_API_VERSION", DEFAULT_API_VERSION),
    )


def get_campaign_service() -> BirthdayCampaignService:
    """Create or retrieve cached birthday campaign service."""
    global _campaign_service

    if _campaign_service is None:
        _campaign_service = BirthdayCampaignService(
            customer_service=get_customer_service(),
            settings_service=get_settings_service(),
            client_factory=create_whatsapp_client,
            template_name=os.getenv("WHATSAPP_BIRTHDAY_TEMPLATE", "birthday_greeting"),
            language_code=os.getenv("WHATSAPP_TEMPLATE_LANGUAGE", "en"),
        )
        logger.info("Birthday campaign service initialized")

    return _campaign_service


def get_event_handler() -> CampaignEventHandler:
    """Create or retrieve cached scheduled event handler."""
    global _event_handler

    if _event_handler is None:
        _event_handler = CampaignEventHandler(campaign_service=get_campaign_service())
        logger.info("Event handler initialized")

    return _event_handler


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    admin_password = os.getenv("ADMIN_PASSWORD") or None
    if admin_password is None:
        logger.warning("No ADMIN_PASSWORD configured - admin login will answer 503")

    session_secret = os.getenv("SESSION_SECRET")
    if not session_secret:
        logger.warning("No SESSION_SECRET configured - using development key")
        session_secret = "dev-session-secret-change-me"

    _fastapi_app = create_app(
        catalog_service=get_catalog_service(),
        customer_service=get_customer_service(),
        cart_service=get_cart_service(),
        settings_service=get_settings_service(),
        campaign_service=get_campaign_service(),
        admin_password=admin_password,
        session_secret=session_secret,
    )
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
