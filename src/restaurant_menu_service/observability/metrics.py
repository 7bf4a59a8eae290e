"""Custom metrics for the restaurant menu service."""

from opentelemetry import metrics

meter = metrics.get_meter("restaurant-menu-svc")

customers_registered_counter = meter.create_counter(
    name="customers_registered_total",
    description="Total number of newly registered customers",
    unit="1",
)

customer_visits_counter = meter.create_counter(
    name="customer_visits_total",
    description="Total number of visits recorded across all customers",
    unit="1",
)

menu_partition_failures_counter = meter.create_counter(
    name="menu_partition_read_failures_total",
    description="Category partitions skipped because they could not be read",
    unit="1",
)

birthday_messages_counter = meter.create_counter(
    name="birthday_messages_total",
    description="Birthday greetings attempted, by outcome",
    unit="1",
)


def record_customer_registered() -> None:
    """Record a newly created customer record."""
    customers_registered_counter.add(1)


def record_customer_visit() -> None:
    """Record one visit increment."""
    customer_visits_counter.add(1)


def record_menu_partition_failure(category: str) -> None:
    """Record a category partition that contributed no items because of a read failure.

    Args:
        category: The category partition that failed
    """
    menu_partition_failures_counter.add(1, {"category": category})


def record_birthday_message(success: bool) -> None:
    """Record the outcome of one birthday greeting.

    Args:
        success: Whether the WhatsApp API accepted the message
    """
    birthday_messages_counter.add(1, {"outcome": "sent" if success else "failed"})
