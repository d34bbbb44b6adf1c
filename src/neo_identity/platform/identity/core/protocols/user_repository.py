"""User repository protocol contract."""

from typing import List, Optional, Protocol, runtime_checkable

from ..entities import User
from ..value_objects import Email


@runtime_checkable
class UserRepository(Protocol):
    """Persistence port for User aggregates.

    Every query is scoped by ``org_id`` except ``find_by_email_any_org``,
    which is the global lookup used before the organization is resolved.
    Implementations enforce uniqueness of ``(email, org_id)`` and
    ``(username, org_id)`` and raise ``DuplicateIdentityError`` on conflict.
    """

    async def find_by_id(self, user_id: str, org_id: str) -> Optional[User]:
        ...

    async def find_all(self, org_id: str) -> List[User]:
        ...

    async def exists(self, user_id: str, org_id: str) -> bool:
        ...

    async def save(self, user: User) -> User:
        """Insert or update a user.

        Raises:
            DuplicateIdentityError: If email or username is taken within the org
        """
        ...

    async def delete(self, user_id: str, org_id: str) -> bool:
        """Delete a user. Returns False when nothing was deleted."""
        ...

    async def find_by_email(self, email: Email, org_id: str) -> Optional[User]:
        ...

    async def find_by_email_any_org(self, email: Email) -> List[User]:
        """Global lookup across organizations."""
        ...

    async def find_by_username(self, username: str, org_id: str) -> Optional[User]:
        ...
