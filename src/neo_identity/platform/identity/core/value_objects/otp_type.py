"""OTP purpose enumeration."""

from enum import Enum

from .....core.exceptions import ValidationError


class OtpType(str, Enum):
    """What a one-time passcode was issued for."""

    PASSWORD_RESET = "PASSWORD_RESET"
    EMAIL_VERIFY = "EMAIL_VERIFY"
    ACCOUNT_ACTIVATION = "ACCOUNT_ACTIVATION"
    TWO_FACTOR = "TWO_FACTOR"

    @classmethod
    def create(cls, value: object) -> "OtpType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid OTP type: {value}", details={"value": str(value)}) from None

    def __str__(self) -> str:
        return self.value
