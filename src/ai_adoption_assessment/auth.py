"""Caller identity.

Authentication is performed by the upstream gateway. This service only
reads the identity headers the gateway forwards.
"""

from fastapi import Header, HTTPException, status

from ai_adoption_assessment.core.identity import UserContext

__all__ = ["UserContext", "get_current_user"]


async def get_current_user(
    x_user_email: str | None = Header(default=None, alias="X-User-Email"),
    x_user_name: str | None = Header(default=None, alias="X-User-Name"),
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
) -> UserContext:
    """Build the UserContext from gateway headers.

    Raises:
        HTTPException: 401 if the X-User-Email header is missing.
    """
    if not x_user_email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Email header is required.",
        )
    return UserContext(
        email=x_user_email.strip().lower(),
        full_name=x_user_name or "",
        role=x_user_role or "user",
    )
