"""Customer identity models.

Customers are keyed by phone number. The phone number is the natural key
of the customers table, so uniqueness is enforced by the store itself.
"""

import re
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PHONE_NUMBER_PATTERN = re.compile(r"[0-9]{10,15}")
ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(UTC).date()


class Customer(BaseModel):
    """Registered customer.

    Stored in DynamoDB with phone_number as partition key.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique customer identifier")
    name: str = Field(..., description="Customer name")
    phone_number: str = Field(..., description="Phone number, unique natural key")
    date_of_birth: date | None = Field(None, description="Optional date of birth")
    visits: int = Field(default=0, description="Number of recorded visits", ge=0)
    created_at: datetime = Field(..., description="Registration timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "phone_number": self.phone_number,
            "id": self.id,
            "name": self.name,
            "visits": self.visits,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.date_of_birth is not None:
            item["date_of_birth"] = self.date_of_birth.isoformat()

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Customer":
        """Create Customer from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Customer: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "name": item["name"],
            "phone_number": item["phone_number"],
            "visits": int(item.get("visits", 0)),
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if item.get("date_of_birth"):
            data["date_of_birth"] = date.fromisoformat(item["date_of_birth"])

        return cls(**data)


class CustomerCreate(BaseModel):
    """Registration payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Letters and spaces only")
    phone_number: str = Field(..., description="10 to 15 digits")
    date_of_birth: str | None = Field(None, description="YYYY-MM-DD, not in the future")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that the name is non-empty and made of letters and spaces."""
        name = v.strip()
        if not name:
            raise ValueError("Name is required")
        if not all(ch.isalpha() or ch == " " for ch in name):
            raise ValueError("Name can only contain letters and spaces")
        return name

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        """Validate that the phone number is 10 to 15 digits."""
        if not PHONE_NUMBER_PATTERN.fullmatch(v):
            raise ValueError("Phone number must be 10 to 15 digits")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: str | None) -> str | None:
        """Validate that the date is a real calendar date and not in the future."""
        if v is None or v == "":
            return None
        if not ISO_DATE_PATTERN.fullmatch(v):
            raise ValueError("Date must be in YYYY-MM-DD format")
        try:
            parsed = date.fromisoformat(v)
        except ValueError:
            raise ValueError("Invalid date") from None
        if parsed > utc_today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class CustomerStats(BaseModel):
    """Aggregate figures for the admin dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_customers: int = Field(..., ge=0)
    total_visits: int = Field(..., ge=0)
    average_visits: float = Field(..., ge=0)
