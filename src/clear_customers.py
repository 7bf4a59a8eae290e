"""Maintenance script that deletes every customer record.

Usage:
    python src/clear_customers.py --yes
"""

import argparse
import asyncio
import logging
import os
import sys

from lambda_dependencies import get_dynamodb_resource
from restaurant_menu_service.observability import configure_logging
from restaurant_menu_service.repositories.customer_repository import CustomerRepository
from restaurant_menu_service.repositories.errors import StorageError
from restaurant_menu_service.services.customer_service import CustomerService

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete every customer record.")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm the deletion; without it nothing is deleted",
    )
    return parser.parse_args(argv)


def clear_customers(customer_service: CustomerService) -> int:
    """Purge all customers.

    Args:
        customer_service: Service bound to the customers table

    Returns:
        int: Process exit code
    """
    try:
        deleted = asyncio.run(customer_service.purge_all())
    except StorageError as e:
        logger.error(f"Error clearing customers: {e}")
        return 1

    logger.info(f"Successfully deleted {deleted} customer records")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    if not args.yes:
        logger.warning("Refusing to delete customers without --yes")
        return 2

    repository = CustomerRepository(
        dynamodb_resource=get_dynamodb_resource(),
        table_name=os.getenv("DYNAMODB_CUSTOMERS_TABLE", "restaurant-customers"),
    )
    return clear_customers(CustomerService(customer_repository=repository))


if __name__ == "__main__":
    sys.exit(main())
