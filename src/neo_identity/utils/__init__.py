"""Utility helpers shared across neo-identity."""

from .datetime import utc_now, ensure_utc, optional_utc, minutes_from, format_iso
from .uuid import generate_uuid_v7, is_uuid_v7

__all__ = [
    "utc_now",
    "ensure_utc",
    "optional_utc",
    "minutes_from",
    "format_iso",
    "generate_uuid_v7",
    "is_uuid_v7",
]
