"""OTP issuance and verification manager."""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from .....config import IdentitySettings, get_settings
from .....core.exceptions import (
    OtpAlreadyUsed,
    OtpAttemptsExceeded,
    OtpExpired,
    OtpMismatch,
    OtpNotFound,
    OtpRequestThrottled,
    OtpVerificationFailed,
    ValidationError,
)
from .....utils import ensure_utc, utc_now
from ...core.entities import Otp
from ...core.protocols import OtpRepository
from ...core.value_objects import Email, OtpType

logger = logging.getLogger(__name__)


class OtpManager:
    """Issues and verifies one-time passcodes.

    At most one valid OTP exists per ``(email, type, org_id)``: issuing a
    new one supersedes the previous ones first. Verification failures all
    surface as ``OtpVerificationFailed`` subclasses sharing one public
    message; the concrete class is logged, never shown.
    """

    def __init__(self, otp_repository: OtpRepository, settings: Optional[IdentitySettings] = None):
        self._otps = otp_repository
        self._settings = settings or get_settings()

    async def issue(
        self,
        email: object,
        otp_type: object,
        org_id: str,
        ttl_minutes: Optional[float] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Otp:
        """Issue a fresh 6-digit OTP.

        Issuance is throttled per ``(email, type, org_id)``: at most
        ``otp_max_requests_per_window`` codes within the trailing
        ``otp_request_window_minutes``.

        Raises:
            InvalidEmailError: If the email is malformed
            ValidationError: If the OTP type is unknown or the TTL is not positive
            OtpRequestThrottled: If the address already hit the request limit
        """
        moment = ensure_utc(now) if now else utc_now()
        address = Email.create(email)
        kind = OtpType.create(otp_type)
        ttl = ttl_minutes if ttl_minutes is not None else self._settings.otp_ttl_minutes
        if ttl <= 0:
            raise ValidationError("OTP TTL must be positive")

        await self._check_request_rate(address, kind, org_id, moment)

        superseded = await self._otps.supersede_outstanding(address, kind, org_id, moment)
        otp = Otp.issue(
            email=address,
            otp_type=kind,
            org_id=org_id,
            ttl_minutes=ttl,
            max_attempts=self._settings.otp_max_attempts,
            ip_address=ip_address,
            user_agent=user_agent,
            now=moment,
        )
        await self._otps.save(otp)
        logger.info(f"Issued {kind.value} OTP {otp.id} for {address} in org {org_id} (superseded {superseded})")
        return otp

    async def _check_request_rate(self, address: Email, kind: OtpType, org_id: str, moment: datetime) -> None:
        limit = self._settings.otp_max_requests_per_window
        if limit <= 0:
            return
        window = timedelta(minutes=self._settings.otp_request_window_minutes)
        recent = [
            otp for otp in await self._otps.find_recent_by_email(address, org_id, moment - window)
            if otp.type is kind
        ]
        if len(recent) < limit:
            return

        # recent is newest-first; the window reopens when the limit-th newest ages out
        reopens_at = recent[limit - 1].created_at + window
        retry_after = int((reopens_at - moment).total_seconds()) + 1
        logger.warning(
            f"OTP request throttled for {address} ({kind.value}) in org {org_id}: "
            f"{len(recent)} issued in the last {self._settings.otp_request_window_minutes}m"
        )
        raise OtpRequestThrottled(address.value, kind.value, retry_after)

    async def verify(
        self,
        email: object,
        otp_type: object,
        code: str,
        org_id: str,
        now: Optional[datetime] = None,
    ) -> Otp:
        """Verify and consume an OTP.

        Checks run in order: attempts left, code match, expiry, used flag.
        The final ``mark_used`` is a compare-and-swap that only flips a row
        still valid at ``now``: of several concurrent verifications one
        succeeds, and a code superseded by a concurrent ``issue`` fails.

        Raises:
            OtpNotFound, OtpAttemptsExceeded, OtpMismatch, OtpExpired, OtpAlreadyUsed
        """
        moment = ensure_utc(now) if now else utc_now()
        address = Email.create(email)
        kind = OtpType.create(otp_type)

        try:
            otp = await self._consume(address, kind, code, org_id, moment)
        except OtpVerificationFailed as exc:
            logger.warning(f"OTP verification failed for {address} in org {org_id}: {exc.reason}")
            raise

        logger.info(f"Verified {kind.value} OTP {otp.id} for {address} in org {org_id}")
        return otp

    async def _consume(self, email: Email, kind: OtpType, code: str, org_id: str, moment: datetime) -> Otp:
        otp = await self._otps.find_by_email_and_type(email, kind, org_id)
        if otp is None:
            raise OtpNotFound()
        if otp.attempts_exhausted:
            raise OtpAttemptsExceeded()
        if not otp.matches(code):
            otp.attempts = await self._otps.record_failed_attempt(otp.id, org_id, moment)
            raise OtpMismatch()
        if otp.is_expired(moment):
            raise OtpExpired()
        if otp.used:
            raise OtpAlreadyUsed()
        if not await self._otps.mark_used(otp.id, org_id, moment):
            raise OtpAlreadyUsed()
        otp.mark_used(moment)
        return otp

    async def find_valid(self, email: object, otp_type: object, org_id: str, now: Optional[datetime] = None) -> Optional[Otp]:
        return await self._otps.find_valid_by_email_and_type(
            Email.create(email), OtpType.create(otp_type), org_id, ensure_utc(now) if now else utc_now()
        )

    async def cleanup_expired(self, org_id: str, now: Optional[datetime] = None) -> int:
        return await self._otps.delete_expired_otp(org_id, ensure_utc(now) if now else utc_now())

    async def cleanup_used(self, org_id: str, hours_old: Optional[int] = None, now: Optional[datetime] = None) -> int:
        if hours_old is None:
            hours_old = self._settings.used_otp_retention_hours
        return await self._otps.delete_used_otp(org_id, hours_old, ensure_utc(now) if now else utc_now())

    async def run_cleanup(self, org_ids: Optional[Iterable[str]] = None, now: Optional[datetime] = None) -> Dict[str, int]:
        """Sweep expired and old used OTPs for each organization.

        Returns:
            Totals under ``expired`` and ``used``
        """
        moment = ensure_utc(now) if now else utc_now()
        totals = {"expired": 0, "used": 0}
        for org_id in org_ids if org_ids is not None else self._settings.cleanup_org_ids:
            expired = await self.cleanup_expired(org_id, moment)
            used = await self.cleanup_used(org_id, now=moment)
            totals["expired"] += expired
            totals["used"] += used
            logger.debug(f"OTP cleanup for org {org_id}: {expired} expired, {used} used")
        if totals["expired"] or totals["used"]:
            logger.info(f"OTP cleanup removed {totals['expired']} expired and {totals['used']} used codes")
        return totals
