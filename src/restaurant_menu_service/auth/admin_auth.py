"""Admin password validation.

The admin area is protected by a single shared password taken from
configuration. A successful login is remembered in the signed session cookie.
"""

import secrets

ADMIN_SESSION_KEY = "is_admin"


class AdminNotConfiguredError(Exception):
    """No admin password is configured, so nobody can log in."""


class AdminPasswordValidator:
    """Validates the admin password."""

    def __init__(self, password: str | None) -> None:
        """Initialize validator with the configured admin password.

        Args:
            password: The admin password, or None if admin access is disabled
        """
        self.password = password or None

    @property
    def is_configured(self) -> bool:
        return self.password is not None

    def validate(self, candidate: str) -> bool:
        """Validate a login attempt.

        Args:
            candidate: Password supplied by the user

        Returns:
            bool: True if it matches the configured password

        Raises:
            AdminNotConfiguredError: If no admin password is configured
        """
        if self.password is None:
            raise AdminNotConfiguredError("Admin password is not configured")

        return secrets.compare_digest(candidate.encode("utf-8"), self.password.encode("utf-8"))
