"""
Pre-write hooks for the data-access layer.

Every UPDATE issued by a service goes through apply_update / apply_update_many,
which overwrite updated_at before the row is written. The BEFORE UPDATE trigger
in schema.sql does the same on the database side; whichever runs last wins and
both move the value forward.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from fastapi import HTTPException
from postgrest.exceptions import APIError
from supabase import Client

from kaskad.database.errors import raise_for_api_error

logger = logging.getLogger(__name__)

Timestamp = Union[str, datetime, None]


def parse_timestamp(value: Timestamp) -> Optional[datetime]:
    """Parse a timestamptz as returned by PostgREST (ISO 8601, maybe with a trailing Z)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def touch_updated_at(values: Dict[str, Any], previous: Timestamp = None) -> Dict[str, Any]:
    """Return a copy of values with updated_at set to now.

    updated_at is always strictly later than previous, even when the clock
    has not moved (or moved backwards) since the last write.
    """
    stamped = dict(values)
    now = utcnow()
    last = parse_timestamp(previous)
    if last is not None and now <= last:
        now = last + timedelta(microseconds=1)
    stamped["updated_at"] = now.isoformat()
    return stamped


def latest_timestamp(rows: Iterable[Dict[str, Any]], column: str = "updated_at") -> Optional[datetime]:
    stamps = [parse_timestamp(r.get(column)) for r in rows]
    stamps = [s for s in stamps if s is not None]
    return max(stamps) if stamps else None


def apply_update(supabase: Client, table: str, row: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
    """Update a single row by id, stamping updated_at. Returns the stored row."""
    stamped = touch_updated_at(values, row.get("updated_at"))
    try:
        result = supabase.table(table)\
            .update(stamped)\
            .eq("id", row["id"])\
            .execute()
    except APIError as e:
        raise_for_api_error(e)
    if not result.data:
        raise HTTPException(status_code=404, detail=f"{table} row {row['id']} not found")
    return result.data[0]


def apply_update_many(supabase: Client, table: str, rows: List[Dict[str, Any]], values: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Update several rows with the same values and a single updated_at later than all of them."""
    if not rows:
        return []
    stamped = touch_updated_at(values, latest_timestamp(rows))
    try:
        result = supabase.table(table)\
            .update(stamped)\
            .in_("id", [r["id"] for r in rows])\
            .execute()
    except APIError as e:
        raise_for_api_error(e)
    logger.debug("Updated %d %s rows", len(result.data or []), table)
    return result.data or []
