"""FastAPI dependencies for the admin session gate."""

from fastapi import HTTPException, Request

from restaurant_menu_service.auth.admin_auth import ADMIN_SESSION_KEY


def is_admin_session(request: Request) -> bool:
    """Whether the request carries a logged-in admin session."""
    return bool(request.session.get(ADMIN_SESSION_KEY, False))


def require_admin(request: Request) -> None:
    """FastAPI dependency that rejects requests without an admin session.

    Args:
        request: Incoming request (injected by FastAPI)

    Raises:
        HTTPException: 401 if the session is not an admin session
    """
    if not is_admin_session(request):
        raise HTTPException(status_code=401, detail="Unauthorized - Admin access required")
