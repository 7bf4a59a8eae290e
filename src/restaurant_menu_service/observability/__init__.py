"""Logging, tracing and metrics setup."""

from restaurant_menu_service.observability.config import configure_logging, setup_observability
from restaurant_menu_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
