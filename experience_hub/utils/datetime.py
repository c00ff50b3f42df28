"""Timezone helpers shared by persistence and socket payloads.

Domain objects carry aware datetimes in the application timezone. SQL columns
are declared without timezone support, so values are stored as naive local
times and re-localized when read back.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from experience_hub.config import get_settings

logger = logging.getLogger(__name__)

_FIXED_OFFSET = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def parse_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA name or a ``UTC+HH:MM`` style offset.

    Unknown names resolve to UTC.
    """

    name = (name or "").strip()
    if not name or name.upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc

    match = _FIXED_OFFSET.match(name)
    if match:
        offset = timedelta(
            hours=int(match["hours"]), minutes=int(match["minutes"] or 0)
        )
        return timezone(-offset if match["sign"] == "-" else offset)

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return timezone.utc


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    return parse_timezone(get_settings().app_timezone)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone; naive values are taken as local."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return the naive local representation used by ``DateTime`` columns."""

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def now_in_app_naive_datetime() -> datetime:
    return now_in_app_timezone().replace(tzinfo=None)


def isoformat_or_none(value: datetime | None) -> str | None:
    localized = ensure_app_timezone(value)
    return localized.isoformat() if localized is not None else None
