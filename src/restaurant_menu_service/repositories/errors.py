"""Repository exceptions.

Not-found is an expected outcome and is reported as a None return value.
These exceptions cover the outcomes a caller has to act on.
"""


class RepositoryError(Exception):
    """Base class for repository failures."""


class StorageError(RepositoryError):
    """The document store could not complete the operation."""


class CustomerAlreadyExistsError(RepositoryError):
    """A customer with the same phone number is already stored."""

    def __init__(self, phone_number: str) -> None:
        super().__init__(f"Customer with phone number {phone_number} already exists")
        self.phone_number = phone_number
