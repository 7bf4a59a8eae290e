"""DynamoDB helpers: error types, paged reads and condition failures."""

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import Table

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

# Service errors plus client-side failures such as a refused connection
DYNAMODB_ERRORS = (ClientError, BotoCoreError)


def query_all_pages(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until the result is exhausted.

    Args:
        table: DynamoDB table resource
        **kwargs: Arguments passed through to Table.query

    Returns:
        list: All items across pages
    """
    items: list[dict[str, Any]] = []
    response = table.query(**kwargs)
    items.extend(response.get("Items", []))

    while response.get("LastEvaluatedKey"):
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


def scan_all_pages(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Run a scan and follow LastEvaluatedKey until the table is exhausted.

    Args:
        table: DynamoDB table resource
        **kwargs: Arguments passed through to Table.scan

    Returns:
        list: All items across pages
    """
    items: list[dict[str, Any]] = []
    response = table.scan(**kwargs)
    items.extend(response.get("Items", []))

    while response.get("LastEvaluatedKey"):
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


def is_conditional_check_failure(error: Exception) -> bool:
    """Whether an error was raised by a failed ConditionExpression."""
    if not isinstance(error, ClientError):
        return False
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED
