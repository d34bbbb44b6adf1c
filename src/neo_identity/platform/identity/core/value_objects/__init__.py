"""Identity value objects."""

from .email import Email
from .user_status import UserStatus
from .otp_type import OtpType
from .states import OtpState, SessionState
from .effective_permissions import EffectivePermissions

__all__ = ["Email", "UserStatus", "OtpType", "OtpState", "SessionState", "EffectivePermissions"]
