"""
Query helpers shared by the resource services: ObjectId parsing, sort and projection
parsing from query strings, pagination math and the school-event filter builder.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from fastapi import status
from pymongo import ASCENDING, DESCENDING

from campushub.utils.exceptions import AppError


def parse_object_id(value: str, entity: str) -> ObjectId:
    """
    Convert a path/query id into an `ObjectId`.

    Raises:
        AppError(400): `Invalid <entity> id` when the value is not a 24-char hex string.
    """
    if not value or not ObjectId.is_valid(value):
        raise AppError(f"Invalid {entity} id", status.HTTP_400_BAD_REQUEST)
    return ObjectId(value)


def parse_sort(sort: Optional[str], default: str = "-created_at") -> List[Tuple[str, int]]:
    """
    Parse a comma-separated sort string (`-created_at,org_name`) into a Motor sort spec.

    A leading `-` means descending.
    """
    spec = []
    for field in (sort or default).split(","):
        field = field.strip()
        if not field:
            continue
        if field.startswith("-"):
            spec.append((field[1:], DESCENDING))
        else:
            spec.append((field, ASCENDING))
    return spec


def parse_projection(fields: Optional[str], allowed: Optional[List[str]] = None) -> Optional[Dict[str, int]]:
    """
    Parse a comma-separated field list into a projection dict.

    Raises:
        AppError(400): When `allowed` is given and a requested field is not in it.
    """
    if not fields:
        return None
    requested = [f.strip() for f in fields.split(",") if f.strip()]
    if allowed is not None:
        invalid = [f for f in requested if f not in allowed]
        if invalid:
            raise AppError(f"Invalid fields requested: {', '.join(invalid)}", status.HTTP_400_BAD_REQUEST)
    return {field: 1 for field in requested}


def sort_direction(order: str) -> int:
    return ASCENDING if order == "asc" else DESCENDING


def page_skip(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def regex_filter(value: str) -> Dict[str, Any]:
    """Case-insensitive substring match."""
    return {"$regex": re.escape(value), "$options": "i"}


def day_range(day: datetime) -> Dict[str, datetime]:
    """`{"$gte": start-of-day, "$lt": next-day}` for the calendar day containing `day`."""
    if day.tzinfo is None:
        day = day.replace(tzinfo=timezone.utc)
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    return {"$gte": start, "$lt": start + timedelta(days=1)}


def build_event_filter(
    title: Optional[str] = None,
    venue: Optional[str] = None,
    organized_by: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the Mongo filter used by school-event listing."""
    query: Dict[str, Any] = {}
    if title:
        query["title"] = regex_filter(title)
    if venue:
        query["venue"] = regex_filter(venue)
    if organized_by:
        query["organized_by"] = organized_by
    if date:
        query["date"] = day_range(date)
    return query
