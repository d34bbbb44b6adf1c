"""OTP repository protocol contract."""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from ..entities import Otp
from ..value_objects import Email, OtpType


@runtime_checkable
class OtpRepository(Protocol):
    """Persistence port for one-time passcodes.

    ``mark_used`` is the single serialization point for verification: it
    must flip ``used`` from false to true atomically (compare-and-swap)
    so that concurrent verifications of one OTP produce one winner.
    """

    async def find_by_id(self, otp_id: str, org_id: str) -> Optional[Otp]:
        ...

    async def find_all(self, org_id: str) -> List[Otp]:
        ...

    async def exists(self, otp_id: str, org_id: str) -> bool:
        ...

    async def save(self, otp: Otp) -> Otp:
        ...

    async def delete(self, otp_id: str, org_id: str) -> bool:
        ...

    async def find_by_email_and_type(self, email: Email, otp_type: OtpType, org_id: str) -> Optional[Otp]:
        """Most recently issued, non-superseded OTP for the tuple, used or not."""
        ...

    async def find_valid_by_email_and_type(
        self, email: Email, otp_type: OtpType, org_id: str, now: datetime
    ) -> Optional[Otp]:
        """Most recent OTP that is unused, not superseded and unexpired at ``now``."""
        ...

    async def find_recent_by_email(self, email: Email, org_id: str, since: datetime) -> List[Otp]:
        """OTPs of any type issued at or after ``since``, newest first."""
        ...

    async def supersede_outstanding(self, email: Email, otp_type: OtpType, org_id: str, now: datetime) -> int:
        """Mark every unused, non-superseded OTP of the tuple as superseded.

        Returns:
            Number of OTPs superseded
        """
        ...

    async def mark_used(self, otp_id: str, org_id: str, now: datetime) -> bool:
        """Atomically set ``used`` while the OTP is still valid at ``now``.

        The update must not apply to an OTP that is used, superseded or
        expired, even if it was loaded before that happened.

        Returns:
            True for the single caller that flipped the flag, False otherwise
        """
        ...

    async def record_failed_attempt(self, otp_id: str, org_id: str, now: datetime) -> int:
        """Atomically increment the attempt counter. Returns the new value."""
        ...

    async def delete_expired_otp(self, org_id: str, now: datetime) -> int:
        ...

    async def delete_used_otp(self, org_id: str, hours_old: int, now: datetime) -> int:
        """Delete used OTPs last updated more than ``hours_old`` hours before ``now``."""
        ...
