"""In-memory UserRepository."""

from typing import List, Optional

from .....core.exceptions import DuplicateIdentityError
from ...core.entities import User
from ...core.value_objects import Email
from .memory_base import InMemoryRepository


class InMemoryUserRepository(InMemoryRepository[User]):
    entity_type = "User"

    def _check_unique(self, user: User) -> None:
        for other in self._iter(lambda item: item.org_id == user.org_id and item.id != user.id):
            if other.email == user.email:
                raise DuplicateIdentityError("User", "email", user.email.value, user.org_id)
            if other.username == user.username:
                raise DuplicateIdentityError("User", "username", user.username, user.org_id)

    async def find_by_email(self, email: Email, org_id: str) -> Optional[User]:
        address = Email.create(email)
        async with self._lock:
            matches = self._select(lambda item: item.org_id == org_id and item.email == address)
        return matches[0] if matches else None

    async def find_by_email_any_org(self, email: Email) -> List[User]:
        address = Email.create(email)
        async with self._lock:
            return self._select(lambda item: item.email == address)

    async def find_by_username(self, username: str, org_id: str) -> Optional[User]:
        async with self._lock:
            matches = self._select(lambda item: item.org_id == org_id and item.username == username)
        return matches[0] if matches else None
