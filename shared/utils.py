"""Shared utility functions."""
import re
import hashlib
from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from bson.errors import InvalidId


_SLUG_SEPARATOR = re.compile(r"[^a-z0-9\u4e00-\u9fff]+")


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def generate_slug(name: str) -> str:
    """Derive a URL-safe slug from a category name.

    Han characters are kept; every other run of non-alphanumerics becomes a
    single hyphen.
    """
    slug = _SLUG_SEPARATOR.sub("-", (name or "").lower())
    return slug.strip("-")


def parse_tags(value: Any) -> List[str]:
    """Turn a comma-separated string (or a list) into a clean tag list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(tag).strip() for tag in value if str(tag).strip()]


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse a store identifier, returning None when it is malformed."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would mint a fresh identifier
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def token_fingerprint(token: str) -> str:
    """Short stable hash of a session token, safe to publish on a channel."""
    return hashlib.sha256(token.encode()).hexdigest()[:16]


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO format string."""
    if dt is None:
        return None
    return dt.isoformat()


def format_date(dt: Optional[datetime]) -> str:
    """Format a datetime as YYYY-MM-DD, defaulting to today."""
    return (dt or get_utc_now()).date().isoformat()
