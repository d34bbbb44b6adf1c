"""Email address value object."""

import re
from dataclasses import dataclass
from typing import ClassVar, FrozenSet, Pattern

from .....core.exceptions import InvalidEmailError


@dataclass(frozen=True)
class Email:
    """Normalized (trimmed, lower-cased) and validated email address.

    Equality is by normalized value, so ``Email(" Bob@Example.com")``
    equals ``Email("bob@example.com")``.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    PATTERN: ClassVar[Pattern[str]] = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
    FREE_MAIL_DOMAINS: ClassVar[FrozenSet[str]] = frozenset(
        {"gmail.com", "yahoo.com", "hotmail.com", "outlook.com"}
    )

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise InvalidEmailError("Email must be a string")

        normalized = self.value.strip().lower()
        object.__setattr__(self, "value", normalized)

        if not normalized:
            raise InvalidEmailError("Email cannot be empty")

        if not self.PATTERN.match(normalized):
            raise InvalidEmailError(value=normalized)

        if ".." in normalized:
            raise InvalidEmailError(value=normalized)

        parts = normalized.split("@")
        if len(parts) != 2:
            raise InvalidEmailError(value=normalized)

        domain = parts[1]
        if domain.startswith(".") or domain.endswith("."):
            raise InvalidEmailError(value=normalized)

        if len(normalized) > self.MAX_LENGTH:
            raise InvalidEmailError("Email too long", value=normalized)

    @classmethod
    def create(cls, raw: object) -> "Email":
        """Build an Email from raw input, raising InvalidEmailError on bad format."""
        if isinstance(raw, Email):
            return raw
        return cls(raw)  # type: ignore[arg-type]

    @property
    def domain(self) -> str:
        return self.value.split("@")[1]

    @property
    def local_part(self) -> str:
        return self.value.split("@")[0]

    def is_corporate_email(self) -> bool:
        """True when the domain is NOT one of the known free-mail providers.

        Anything outside the short free-mail list counts as corporate,
        including unknown consumer providers.
        """
        return self.domain not in self.FREE_MAIL_DOMAINS

    def __str__(self) -> str:
        return self.value
