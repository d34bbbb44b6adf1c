"""In-memory OtpRepository.

``mark_used`` and ``record_failed_attempt`` run under the repository
lock, which makes them atomic for coroutines sharing one event loop.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from ...core.entities import Otp
from ...core.value_objects import Email, OtpType
from .memory_base import InMemoryRepository


class InMemoryOtpRepository(InMemoryRepository[Otp]):
    entity_type = "Otp"

    async def find_by_email_and_type(self, email: Email, otp_type: OtpType, org_id: str) -> Optional[Otp]:
        address, kind = Email.create(email), OtpType.create(otp_type)
        async with self._lock:
            matches = self._select(
                lambda item: item.org_id == org_id
                and item.email == address
                and item.type is kind
                and not item.superseded
            )
        return matches[-1] if matches else None

    async def find_valid_by_email_and_type(
        self, email: Email, otp_type: OtpType, org_id: str, now: datetime
    ) -> Optional[Otp]:
        address, kind = Email.create(email), OtpType.create(otp_type)
        async with self._lock:
            matches = self._select(
                lambda item: item.org_id == org_id
                and item.email == address
                and item.type is kind
                and item.is_valid(now)
            )
        return matches[-1] if matches else None

    async def find_recent_by_email(self, email: Email, org_id: str, since: datetime) -> List[Otp]:
        address = Email.create(email)
        async with self._lock:
            matches = self._select(
                lambda item: item.org_id == org_id and item.email == address and item.created_at >= since
            )
        return list(reversed(matches))

    async def supersede_outstanding(self, email: Email, otp_type: OtpType, org_id: str, now: datetime) -> int:
        address, kind = Email.create(email), OtpType.create(otp_type)
        async with self._lock:
            count = 0
            for item in self._iter(
                lambda item: item.org_id == org_id and item.email == address and item.type is kind
            ):
                if item.supersede(now):
                    count += 1
            return count

    async def mark_used(self, otp_id: str, org_id: str, now: datetime) -> bool:
        async with self._lock:
            item = self._items.get((org_id, otp_id))
            if item is None or not item.is_valid(now):
                return False
            item.mark_used(now)
            return True

    async def record_failed_attempt(self, otp_id: str, org_id: str, now: datetime) -> int:
        async with self._lock:
            item = self._items.get((org_id, otp_id))
            if item is None:
                return 0
            return item.record_failed_attempt(now)

    async def delete_expired_otp(self, org_id: str, now: datetime) -> int:
        async with self._lock:
            return self._delete_where(lambda item: item.org_id == org_id and item.is_expired(now))

    async def delete_used_otp(self, org_id: str, hours_old: int, now: datetime) -> int:
        cutoff = now - timedelta(hours=hours_old)
        async with self._lock:
            return self._delete_where(lambda item: item.org_id == org_id and item.used and item.updated_at < cutoff)

    def _delete_where(self, predicate) -> int:
        keys = [key for key, item in self._items.items() if predicate(item)]
        for key in keys:
            del self._items[key]
        return len(keys)
