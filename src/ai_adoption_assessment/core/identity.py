"""The caller identity passed from the HTTP layer into services."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserContext:
    """The authenticated caller.

    Attributes:
        email: User email, used as the owner key on user-scoped entities.
        full_name: Display name, may be empty.
        role: Application role (``admin`` or ``user``).
    """

    email: str
    full_name: str = ""
    role: str = "user"
