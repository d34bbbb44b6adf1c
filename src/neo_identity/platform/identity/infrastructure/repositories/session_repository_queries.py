"""
Session repository SQL queries.

Provides SQL queries for session persistence with a configurable schema.
"""


class SessionQueries:
    """SQL queries for session operations with configurable schemas."""

    COLUMNS = (
        "id, org_id, user_id, token, expires_at, ip_address, user_agent, "
        "revoked_at, revoke_reason, created_at, updated_at"
    )

    def __init__(self, schema: str = "identity"):
        """
        Initialize session queries with configurable schema.

        Args:
            schema: Schema holding the sessions table (default: identity)
        """
        self.schema = schema

    @property
    def UPSERT_SESSION(self) -> str:
        return f"""
            INSERT INTO {self.schema}.sessions ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            ON CONFLICT (id)
            DO UPDATE SET
                expires_at = EXCLUDED.expires_at,
                revoked_at = EXCLUDED.revoked_at,
                revoke_reason = EXCLUDED.revoke_reason,
                updated_at = EXCLUDED.updated_at
        """

    @property
    def GET_SESSION(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.sessions
            WHERE id = $1 AND org_id = $2
        """

    @property
    def GET_SESSION_BY_TOKEN(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.sessions
            WHERE token = $1
        """

    @property
    def LIST_ORG_SESSIONS(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.sessions
            WHERE org_id = $1
            ORDER BY created_at ASC
        """

    @property
    def SESSION_EXISTS(self) -> str:
        return f"""
            SELECT EXISTS(
                SELECT 1 FROM {self.schema}.sessions WHERE id = $1 AND org_id = $2
            )
        """

    @property
    def DELETE_SESSION(self) -> str:
        return f"""
            DELETE FROM {self.schema}.sessions
            WHERE id = $1 AND org_id = $2
        """

    @property
    def GET_ACTIVE_SESSIONS(self) -> str:
        return f"""
            SELECT {self.COLUMNS}
            FROM {self.schema}.sessions
            WHERE user_id = $1 AND org_id = $2
              AND revoked_at IS NULL AND expires_at > $3
            ORDER BY created_at DESC
        """

    @property
    def COUNT_ACTIVE_SESSIONS(self) -> str:
        return f"""
            SELECT COUNT(*)
            FROM {self.schema}.sessions
            WHERE user_id = $1 AND org_id = $2
              AND revoked_at IS NULL AND expires_at > $3
        """

    @property
    def REVOKE_USER_SESSIONS(self) -> str:
        return f"""
            UPDATE {self.schema}.sessions
            SET revoked_at = $4, revoke_reason = $3, updated_at = $4
            WHERE user_id = $1 AND org_id = $2 AND revoked_at IS NULL
        """

    @property
    def DELETE_EXPIRED_SESSIONS(self) -> str:
        return f"""
            DELETE FROM {self.schema}.sessions
            WHERE expires_at <= $1
        """
