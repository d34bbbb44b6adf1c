"""User status value object."""

from enum import Enum

from .....core.exceptions import InvalidStatusError


class UserStatus(str, Enum):
    """Closed set of account states. Transitions live on the User entity."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    LOCKED = "LOCKED"

    @classmethod
    def create(cls, value: object) -> "UserStatus":
        """Validate membership, raising InvalidStatusError for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(value) from None

    def can_login(self) -> bool:
        return self is UserStatus.ACTIVE

    def __str__(self) -> str:
        return self.value
