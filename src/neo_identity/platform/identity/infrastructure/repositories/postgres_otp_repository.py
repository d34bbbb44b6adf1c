"""asyncpg implementation of OtpRepository.

Verification atomicity rests on ``mark_used``: a conditional UPDATE
guarded by ``used = FALSE AND superseded = FALSE AND expires_at > now``,
succeeding only for the caller whose command tag reports exactly one row.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, List, Mapping, Optional

import asyncpg

from .....config import IdentitySettings
from .....core.entities import EntityIdentity
from ...core.entities import Otp
from ...core.value_objects import Email, OtpType
from .otp_repository_queries import OtpQueries
from .postgres_base import affected_rows

logger = logging.getLogger(__name__)


class PostgresOtpRepository:
    def __init__(self, db_pool: asyncpg.Pool, schema: str = "identity"):
        self._db_pool = db_pool
        self.queries = OtpQueries(schema)

    @classmethod
    def from_settings(cls, db_pool: asyncpg.Pool, settings: IdentitySettings) -> "PostgresOtpRepository":
        return cls(db_pool, settings.db_schema)

    async def find_by_id(self, otp_id: str, org_id: str) -> Optional[Otp]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(self.queries.GET_OTP, otp_id, org_id)
            return self._row_to_otp(row) if row else None

    async def find_all(self, org_id: str) -> List[Otp]:
        async with self._db_pool.acquire() as conn:
            rows = await conn.fetch(self.queries.LIST_ORG_OTPS, org_id)
            return [self._row_to_otp(row) for row in rows]

    async def exists(self, otp_id: str, org_id: str) -> bool:
        async with self._db_pool.acquire() as conn:
            return bool(await conn.fetchval(self.queries.OTP_EXISTS, otp_id, org_id))

    async def save(self, otp: Otp) -> Otp:
        async with self._db_pool.acquire() as conn:
            await conn.execute(
                self.queries.UPSERT_OTP,
                otp.id,
                otp.org_id,
                otp.email.value,
                otp.type.value,
                otp.code,
                otp.expires_at,
                otp.used,
                otp.superseded,
                otp.attempts,
                otp.max_attempts,
                otp.ip_address,
                otp.user_agent,
                otp.created_at,
                otp.updated_at,
            )
        return otp

    async def delete(self, otp_id: str, org_id: str) -> bool:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.DELETE_OTP, otp_id, org_id)
            return affected_rows(result) > 0

    async def find_by_email_and_type(self, email: Email, otp_type: OtpType, org_id: str) -> Optional[Otp]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(
                self.queries.GET_LATEST_BY_EMAIL_AND_TYPE,
                Email.create(email).value,
                OtpType.create(otp_type).value,
                org_id,
            )
            return self._row_to_otp(row) if row else None

    async def find_valid_by_email_and_type(
        self, email: Email, otp_type: OtpType, org_id: str, now: datetime
    ) -> Optional[Otp]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(
                self.queries.GET_VALID_BY_EMAIL_AND_TYPE,
                Email.create(email).value,
                OtpType.create(otp_type).value,
                org_id,
                now,
            )
            return self._row_to_otp(row) if row else None

    async def find_recent_by_email(self, email: Email, org_id: str, since: datetime) -> List[Otp]:
        async with self._db_pool.acquire() as conn:
            rows = await conn.fetch(self.queries.GET_RECENT_BY_EMAIL, Email.create(email).value, org_id, since)
            return [self._row_to_otp(row) for row in rows]

    async def supersede_outstanding(self, email: Email, otp_type: OtpType, org_id: str, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(
                self.queries.SUPERSEDE_OUTSTANDING,
                Email.create(email).value,
                OtpType.create(otp_type).value,
                org_id,
                now,
            )
            return affected_rows(result)

    async def mark_used(self, otp_id: str, org_id: str, now: datetime) -> bool:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.MARK_USED, otp_id, org_id, now)
            return result == "UPDATE 1"

    async def record_failed_attempt(self, otp_id: str, org_id: str, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            attempts = await conn.fetchval(self.queries.INCREMENT_ATTEMPTS, otp_id, org_id, now)
            return int(attempts) if attempts is not None else 0

    async def delete_expired_otp(self, org_id: str, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.DELETE_EXPIRED_OTP, org_id, now)
            return affected_rows(result)

    async def delete_used_otp(self, org_id: str, hours_old: int, now: datetime) -> int:
        cutoff = now - timedelta(hours=hours_old)
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.DELETE_USED_OTP, org_id, cutoff)
            deleted = affected_rows(result)
            if deleted:
                logger.debug(f"Deleted {deleted} used OTPs older than {hours_old}h in org {org_id}")
            return deleted

    @staticmethod
    def _row_to_otp(row: Mapping[str, Any]) -> Otp:
        return Otp(
            identity=EntityIdentity(str(row["id"]), row["org_id"] or ""),
            email=Email(row["email"]),
            type=OtpType.create(row["type"]),
            code=row["code"],
            expires_at=row["expires_at"],
            used=row["used"],
            superseded=row["superseded"],
            attempts=row["attempts"],
            max_attempts=row["max_attempts"],
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
