"""
Utility helpers shared across repositories/routers.
"""

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Opaque identifier for a freshly created rate."""
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    """ISO-8601 timestamp in UTC, second precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()
