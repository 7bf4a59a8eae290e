"""FastAPI application for the restaurant website API."""

import logging
import uuid
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from restaurant_menu_service.auth.admin_auth import (
    ADMIN_SESSION_KEY,
    AdminNotConfiguredError,
    AdminPasswordValidator,
)
from restaurant_menu_service.auth.api_dependencies import is_admin_session, require_admin
from restaurant_menu_service.models.cart_models import CartItem, CartItemCreate
from restaurant_menu_service.models.customer_models import Customer, CustomerCreate, CustomerStats
from restaurant_menu_service.models.menu_models import MenuItem, MenuItemCreate
from restaurant_menu_service.models.settings_models import WhatsAppSettings, WhatsAppSettingsUpdate
from restaurant_menu_service.repositories.errors import StorageError
from restaurant_menu_service.services.birthday_campaign_service import BirthdayCampaignService
from restaurant_menu_service.services.cart_service import CartService
from restaurant_menu_service.services.catalog_service import InvalidCategoryError, MenuCatalogService
from restaurant_menu_service.services.customer_service import CustomerService
from restaurant_menu_service.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

CART_SESSION_KEY = "cart_id"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class SuccessResponse(BaseModel):
    """Outcome of an admin session action."""

    success: bool


class AdminLoginRequest(BaseModel):
    """Admin login payload."""

    password: str


class AdminCheckResponse(BaseModel):
    """Whether the current session is an admin session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_admin: bool


class CampaignResponse(BaseModel):
    """Summary of a birthday campaign run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    configured: bool
    sent: int
    failed: int
    failed_phone_numbers: list[str]


def get_cart_id(request: Request) -> str:
    """Return the cart id of the session, assigning a new one on first use."""
    cart_id = request.session.get(CART_SESSION_KEY)
    if not cart_id:
        cart_id = uuid.uuid4().hex
        request.session[CART_SESSION_KEY] = cart_id
    return str(cart_id)


def create_app(
    catalog_service: MenuCatalogService,
    customer_service: CustomerService,
    cart_service: CartService,
    settings_service: SettingsService,
    campaign_service: BirthdayCampaignService,
    admin_password: str | None,
    session_secret: str,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog_service: Service for the menu catalog
        customer_service: Service for customer identity and visits
        cart_service: Service for session carts
        settings_service: Service for WhatsApp settings
        campaign_service: Service running the birthday campaign
        admin_password: Admin password, or None to disable admin login
        session_secret: Signing key for the session cookie

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Menu Service API",
        description="Menu catalog, cart, customer registration and admin API",
        version="1.0.0",
    )
    app.add_middleware(SessionMiddleware, secret_key=session_secret, same_site="lax")

    # Store services in app state for access in route handlers
    app.state.catalog_service = catalog_service
    app.state.customer_service = customer_service
    app.state.cart_service = cart_service
    app.state.settings_service = settings_service
    app.state.campaign_service = campaign_service
    app.state.admin_validator = AdminPasswordValidator(admin_password)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(InvalidCategoryError)
    async def invalid_category_handler(_request: Request, _exc: InvalidCategoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": "Invalid category"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"message": "Operation failed"})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    # Admin session

    @app.post("/api/admin/login", response_model=SuccessResponse, tags=["Admin"])
    async def admin_login(login: AdminLoginRequest, request: Request) -> SuccessResponse:
        """Start an admin session.

        Raises:
            HTTPException: 503 if no admin password is configured, 401 on a wrong password
        """
        try:
            valid = app.state.admin_validator.validate(login.password)
        except AdminNotConfiguredError:
            raise HTTPException(status_code=503, detail="Admin access is not configured") from None

        if not valid:
            logger.warning("Rejected admin login attempt")
            raise HTTPException(status_code=401, detail="Invalid password")

        request.session[ADMIN_SESSION_KEY] = True
        logger.info("Admin session started")
        return SuccessResponse(success=True)

    @app.post("/api/admin/logout", response_model=SuccessResponse, tags=["Admin"])
    async def admin_logout(request: Request) -> SuccessResponse:
        """End the admin session."""
        request.session.clear()
        return SuccessResponse(success=True)

    @app.get("/api/admin/check", response_model=AdminCheckResponse, tags=["Admin"])
    async def admin_check(request: Request) -> AdminCheckResponse:
        """Report whether the current session has admin access."""
        return AdminCheckResponse(is_admin=is_admin_session(request))

    # Menu catalog

    @app.get("/api/categories", response_model=list[str], tags=["Menu"])
    async def list_categories() -> list[str]:
        """List category identifiers in display order."""
        categories: list[str] = app.state.catalog_service.categories()
        return categories

    @app.get("/api/menu-items", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu_items(category: str | None = None) -> list[MenuItem]:
        """List menu items, optionally limited to one category.

        Args:
            category: Optional category identifier

        Returns:
            Menu items in canonical order
        """
        if category is not None:
            return await app.state.catalog_service.list_by_category(category)
        items: list[MenuItem] = await app.state.catalog_service.list_all()
        return items

    @app.get("/api/menu-items/category/{category}", response_model=list[MenuItem], tags=["Menu"])
    async def list_menu_items_by_category(category: str) -> list[MenuItem]:
        """List the items of one category in canonical order."""
        items: list[MenuItem] = await app.state.catalog_service.list_by_category(category)
        return items

    @app.get("/api/menu-items/{item_id}", response_model=MenuItem, tags=["Menu"])
    async def get_menu_item(item_id: str) -> MenuItem:
        """Get one menu item.

        Raises:
            HTTPException: 404 if no item has this id
        """
        item: MenuItem | None = await app.state.catalog_service.get_item(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail="Menu item not found")
        return item

    @app.post(
        "/api/menu-items",
        response_model=MenuItem,
        status_code=201,
        tags=["Menu"],
        dependencies=[Depends(require_admin)],
    )
    async def create_menu_item(item_create: MenuItemCreate) -> MenuItem:
        """Add a dish to the catalog."""
        item: MenuItem = await app.state.catalog_service.add_item(item_create)
        return item

    # Cart

    @app.get("/api/cart", response_model=list[CartItem], tags=["Cart"])
    async def list_cart(cart_id: str = Depends(get_cart_id)) -> list[CartItem]:
        """List the items in the session cart."""
        items: list[CartItem] = await app.state.cart_service.list_items(cart_id)
        return items

    @app.post("/api/cart", response_model=CartItem, tags=["Cart"])
    async def add_to_cart(
        cart_item: CartItemCreate,
        cart_id: str = Depends(get_cart_id),
    ) -> CartItem:
        """Add a menu item to the session cart, increasing the quantity if already present."""
        item: CartItem = await app.state.cart_service.add_item(cart_id, cart_item)
        return item

    @app.delete("/api/cart/{item_id}", response_model=MessageResponse, tags=["Cart"])
    async def remove_from_cart(
        item_id: str,
        cart_id: str = Depends(get_cart_id),
    ) -> MessageResponse:
        """Remove one menu item from the session cart."""
        await app.state.cart_service.remove_item(cart_id, item_id)
        return MessageResponse(message="Item removed from cart")

    @app.delete("/api/cart", response_model=MessageResponse, tags=["Cart"])
    async def clear_cart(cart_id: str = Depends(get_cart_id)) -> MessageResponse:
        """Remove every item from the session cart."""
        await app.state.cart_service.clear(cart_id)
        return MessageResponse(message="Cart cleared")

    # Customers

    @app.get("/api/customers/phone/{phone_number}", response_model=Customer, tags=["Customers"])
    async def get_customer_by_phone(phone_number: str) -> Customer:
        """Look up a customer by phone number.

        Raises:
            HTTPException: 404 if no customer has this phone number
        """
        customer: Customer | None = await app.state.customer_service.find_by_phone(phone_number)
        if customer is None:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    @app.post("/api/customers", response_model=Customer, tags=["Customers"])
    async def register_customer(customer_create: CustomerCreate, response: Response) -> Customer:
        """Register a customer, or return the existing one for the phone number.

        Answers 201 when the customer was created and 200 when it already existed.
        """
        result = await app.state.customer_service.register(customer_create)
        response.status_code = 201 if result.created else 200
        customer: Customer = result.customer
        return customer

    @app.post("/api/customers/visit/{phone_number}", response_model=Customer, tags=["Customers"])
    async def record_visit(phone_number: str) -> Customer:
        """Add one visit for the customer.

        Raises:
            HTTPException: 404 if no customer has this phone number
        """
        customer: Customer | None = await app.state.customer_service.increment_visit(phone_number)
        if customer is None:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    @app.get(
        "/api/customers/stats",
        response_model=CustomerStats,
        tags=["Customers"],
        dependencies=[Depends(require_admin)],
    )
    async def customer_stats() -> CustomerStats:
        """Dashboard statistics over all customers."""
        stats: CustomerStats = await app.state.customer_service.stats()
        return stats

    @app.get(
        "/api/customers",
        response_model=list[Customer],
        tags=["Customers"],
        dependencies=[Depends(require_admin)],
    )
    async def list_customers() -> list[Customer]:
        """List all customers, most visits first."""
        customers: list[Customer] = await app.state.customer_service.list_all()
        return customers

    # WhatsApp

    @app.get(
        "/api/whatsapp-settings",
        response_model=WhatsAppSettings,
        tags=["WhatsApp"],
        dependencies=[Depends(require_admin)],
    )
    async def get_whatsapp_settings() -> WhatsAppSettings:
        """Get the saved WhatsApp settings.

        Raises:
            HTTPException: 404 if settings were never saved
        """
        settings: WhatsAppSettings | None = await app.state.settings_service.get_whatsapp_settings()
        if settings is None:
            raise HTTPException(status_code=404, detail="WhatsApp settings not found")
        return settings

    @app.post(
        "/api/whatsapp-settings",
        response_model=WhatsAppSettings,
        tags=["WhatsApp"],
        dependencies=[Depends(require_admin)],
    )
    async def save_whatsapp_settings(update: WhatsAppSettingsUpdate) -> WhatsAppSettings:
        """Save the WhatsApp credentials used by the birthday campaign."""
        settings: WhatsAppSettings = await app.state.settings_service.save_whatsapp_settings(update)
        return settings

    @app.post(
        "/api/whatsapp/birthday-campaign",
        response_model=CampaignResponse,
        tags=["WhatsApp"],
        dependencies=[Depends(require_admin)],
    )
    async def run_birthday_campaign() -> Any:
        """Send today's birthday greetings now."""
        logger.info("Manual birthday campaign triggered")
        result = await app.state.campaign_service.run()
        return result.to_dict()

    return app
