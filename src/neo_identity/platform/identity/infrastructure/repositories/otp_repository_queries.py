"""
OTP repository SQL queries.

Provides SQL queries for one-time passcode persistence with a
configurable schema.
"""


class OtpQueries:
    """SQL queries for OTP operations with configurable schemas."""

    COLUMNS = (
        "id, org_id, email, type, code, expires_at, used, superseded, attempts, "
        "max_attempts, ip_address, user_agent, created_at, updated_at"
    )

    def __init__(self, schema: str = "identity"):
        self.schema = schema

    @property
    def UPSERT_OTP(self) -> str:
        return f"""
            INSERT INTO {self.schema}.otps ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
            ON CONFLICT (id)
            DO UPDATE SET
                used = EXCLUDED.used,
                superseded = EXCLUDED.superseded,
                attempts = EXCLUDED.attempts,
                updated_at = EXCLUDED.updated_at
        """

    @property
    def GET_OTP(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.otps
            WHERE id = $1 AND org_id = $2
        """

    @property
    def LIST_ORG_OTPS(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.otps
            WHERE org_id = $1
            ORDER BY created_at ASC
        """

    @property
    def OTP_EXISTS(self) -> str:
        return f"""
            SELECT EXISTS(
                SELECT 1 FROM {self.schema}.otps WHERE id = $1 AND org_id = $2
            )
        """

    @property
    def DELETE_OTP(self) -> str:
        return f"""
            DELETE FROM {self.schema}.otps
            WHERE id = $1 AND org_id = $2
        """

    @property
    def GET_LATEST_BY_EMAIL_AND_TYPE(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.otps
            WHERE email = $1 AND type = $2 AND org_id = $3 AND superseded = FALSE
            ORDER BY created_at DESC
            LIMIT 1
        """

    @property
    def GET_VALID_BY_EMAIL_AND_TYPE(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.otps
            WHERE email = $1 AND type = $2 AND org_id = $3
              AND used = FALSE AND superseded = FALSE AND expires_at > $4
            ORDER BY created_at DESC
            LIMIT 1
        """

    @property
    def GET_RECENT_BY_EMAIL(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.otps
            WHERE email = $1 AND org_id = $2 AND created_at >= $3
            ORDER BY created_at DESC
        """

    @property
    def SUPERSEDE_OUTSTANDING(self) -> str:
        return f"""
            UPDATE {self.schema}.otps
            SET superseded = TRUE, updated_at = $4
            WHERE email = $1 AND type = $2 AND org_id = $3
              AND used = FALSE AND superseded = FALSE
        """

    @property
    def MARK_USED(self) -> str:
        # Compare-and-swap; only a still-valid row flips, for exactly one caller
        return f"""
            UPDATE {self.schema}.otps
            SET used = TRUE, updated_at = $3
            WHERE id = $1 AND org_id = $2
              AND used = FALSE AND superseded = FALSE AND expires_at > $3
        """

    @property
    def INCREMENT_ATTEMPTS(self) -> str:
        return f"""
            UPDATE {self.schema}.otps
            SET attempts = attempts + 1, updated_at = $3
            WHERE id = $1 AND org_id = $2
            RETURNING attempts
        """

    @property
    def DELETE_EXPIRED_OTP(self) -> str:
        return f"""
            DELETE FROM {self.schema}.otps
            WHERE org_id = $1 AND expires_at <= $2
        """

    @property
    def DELETE_USED_OTP(self) -> str:
        return f"""
            DELETE FROM {self.schema}.otps
            WHERE org_id = $1 AND used = TRUE AND updated_at < $2
        """
