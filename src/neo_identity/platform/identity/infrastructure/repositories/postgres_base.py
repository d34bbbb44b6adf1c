"""Helpers shared by the asyncpg repositories."""


def affected_rows(result: str) -> int:
    """Row count from an asyncpg command tag ("UPDATE 3", "DELETE 0", ...)."""
    parts = result.split() if result else []
    return int(parts[-1]) if parts and parts[-1].isdigit() else 0
