"""DynamoDB repository for customers.

The customers table uses ``phone_number`` as partition key. Creation is a
conditional put and visit counting is a single ``ADD`` update, so both are
atomic on the store side and need no coordination in the application.
"""

import logging
from datetime import datetime

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_menu_service.models.customer_models import Customer
from restaurant_menu_service.repositories.dynamodb_utils import (
    DYNAMODB_ERRORS,
    is_conditional_check_failure,
    scan_all_pages,
)
from restaurant_menu_service.repositories.errors import CustomerAlreadyExistsError, StorageError

logger = logging.getLogger(__name__)


class CustomerRepository:
    """Repository for customer records keyed by phone number."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_by_phone(self, phone_number: str) -> Customer | None:
        """Retrieve the customer registered with a phone number.

        Args:
            phone_number: Exact phone number

        Returns:
            Customer if found, None otherwise

        Raises:
            StorageError: If the lookup fails
        """
        try:
            response = self.table.get_item(Key={"phone_number": phone_number})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to get customer by phone: {e}")
            raise StorageError("Failed to get customer") from e

        if "Item" not in response:
            return None

        return Customer.from_dynamodb_item(response["Item"])

    def create(self, customer: Customer) -> Customer:
        """Insert a customer unless the phone number is already taken.

        Args:
            customer: Customer to insert

        Returns:
            Customer: The inserted customer

        Raises:
            CustomerAlreadyExistsError: If the phone number is already registered
            StorageError: If the write fails for any other reason
        """
        try:
            self.table.put_item(
                Item=customer.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(phone_number)",
            )
        except DYNAMODB_ERRORS as e:
            if is_conditional_check_failure(e):
                raise CustomerAlreadyExistsError(customer.phone_number) from e
            logger.error(f"Failed to create customer: {e}")
            raise StorageError("Failed to create customer") from e

        return customer

    def increment_visits(self, phone_number: str, updated_at: datetime) -> Customer | None:
        """Atomically add one visit and return the updated record.

        Args:
            phone_number: Phone number of the customer
            updated_at: Timestamp to record as the last update

        Returns:
            Customer with the new visit count, None if no such customer

        Raises:
            StorageError: If the update fails
        """
        try:
            response = self.table.update_item(
                Key={"phone_number": phone_number},
                UpdateExpression="ADD visits :one SET updated_at = :updated_at",
                ConditionExpression="attribute_exists(phone_number)",
                ExpressionAttributeValues={":one": 1, ":updated_at": updated_at.isoformat()},
                ReturnValues="ALL_NEW",
            )
        except DYNAMODB_ERRORS as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to increment customer visits: {e}")
            raise StorageError("Failed to increment customer visits") from e

        return Customer.from_dynamodb_item(response["Attributes"])

    def list_all(self) -> list[Customer]:
        """List every customer, most visits first.

        DynamoDB scans are unordered, so the ordering is applied here.

        Returns:
            list: Customers sorted by visits descending

        Raises:
            StorageError: If the scan fails
        """
        try:
            items = scan_all_pages(self.table)
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to list customers: {e}")
            raise StorageError("Failed to list customers") from e

        customers = [Customer.from_dynamodb_item(item) for item in items]
        return sorted(customers, key=lambda c: c.visits, reverse=True)

    def delete_all(self) -> int:
        """Delete every customer record.

        Returns:
            int: Number of records deleted

        Raises:
            StorageError: If the scan or a delete fails
        """
        try:
            keys = scan_all_pages(self.table, ProjectionExpression="phone_number")
            with self.table.batch_writer() as batch:
                for key in keys:
                    batch.delete_item(Key={"phone_number": key["phone_number"]})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to delete customers: {e}")
            raise StorageError("Failed to delete customers") from e

        return len(keys)
