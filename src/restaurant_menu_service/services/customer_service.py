"""Customer identity service.

Customers are identified by phone number. Registration is a get-or-create on
that key and visits are counted with an atomic store-side increment.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, date, datetime

from restaurant_menu_service.models.customer_models import Customer, CustomerCreate, CustomerStats
from restaurant_menu_service.observability import traced
from restaurant_menu_service.observability.metrics import (
    record_customer_registered,
    record_customer_visit,
)
from restaurant_menu_service.repositories.customer_repository import CustomerRepository
from restaurant_menu_service.repositories.errors import CustomerAlreadyExistsError

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    """Outcome of a get-or-create registration.

    Attributes:
        customer: The stored customer
        created: True if this call created the record, False if it already existed
    """

    customer: Customer
    created: bool


class CustomerService:
    """Service for customer lookup, registration and visit tracking."""

    def __init__(self, customer_repository: CustomerRepository) -> None:
        """Initialize the CustomerService.

        Args:
            customer_repository: Repository for customer records
        """
        self.customer_repository = customer_repository

    async def find_by_phone(self, phone_number: str) -> Customer | None:
        """Get the customer with exactly this phone number.

        Args:
            phone_number: Phone number to look up

        Returns:
            Customer if registered, None otherwise
        """
        return self.customer_repository.get_by_phone(phone_number)

    @traced("customers.create")
    async def create(self, customer_create: CustomerCreate) -> Customer:
        """Create a customer with zero visits.

        Args:
            customer_create: Validated registration details

        Returns:
            The created Customer

        Raises:
            CustomerAlreadyExistsError: If the phone number is already registered
        """
        now = datetime.now(UTC)
        customer = Customer(
            id=uuid.uuid4().hex,
            name=customer_create.name,
            phone_number=customer_create.phone_number,
            date_of_birth=(
                date.fromisoformat(customer_create.date_of_birth)
                if customer_create.date_of_birth
                else None
            ),
            visits=0,
            created_at=now,
            updated_at=now,
        )

        created = self.customer_repository.create(customer)
        record_customer_registered()
        logger.info(f"Registered customer {created.id}")
        return created

    async def register(self, customer_create: CustomerCreate) -> RegistrationResult:
        """Return the customer for a phone number, creating it if needed.

        When two registrations for the same phone number race, the store
        rejects the second insert and the existing record is returned.

        Args:
            customer_create: Validated registration details

        Returns:
            RegistrationResult with the stored customer
        """
        try:
            customer = await self.create(customer_create)
            return RegistrationResult(customer=customer, created=True)
        except CustomerAlreadyExistsError:
            logger.info("Customer already registered, returning existing record")

        existing = self.customer_repository.get_by_phone(customer_create.phone_number)
        if existing is None:
            # Deleted between the failed insert and the read; nothing sensible to return
            raise CustomerAlreadyExistsError(customer_create.phone_number)
        return RegistrationResult(customer=existing, created=False)

    @traced("customers.increment_visit")
    async def increment_visit(self, phone_number: str) -> Customer | None:
        """Add exactly one visit for the customer.

        Every call counts. The client only calls this once per session, but
        the service does not depend on that.

        Args:
            phone_number: Phone number of the customer

        Returns:
            Updated Customer, or None if no customer has that phone number
        """
        customer = self.customer_repository.increment_visits(phone_number, datetime.now(UTC))
        if customer is None:
            logger.info("Visit not recorded, customer not found")
            return None

        record_customer_visit()
        return customer

    async def list_all(self) -> list[Customer]:
        """List all customers ordered by visits, highest first."""
        return self.customer_repository.list_all()

    async def stats(self) -> CustomerStats:
        """Compute dashboard totals over all customers."""
        customers = self.customer_repository.list_all()
        total_visits = sum(c.visits for c in customers)
        average = round(total_visits / len(customers), 1) if customers else 0.0
        return CustomerStats(
            total_customers=len(customers),
            total_visits=total_visits,
            average_visits=average,
        )

    @traced("customers.purge_all")
    async def purge_all(self) -> int:
        """Delete every customer record.

        Returns:
            Number of customers deleted
        """
        deleted = self.customer_repository.delete_all()
        logger.warning(f"Purged {deleted} customer records")
        return deleted
