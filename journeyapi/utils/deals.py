"""
Deal matching against the vendor catalog's ``deals`` structure.

birthday: a birthday deal object is present
daily:    at least one deal listed for the given weekday
special:  at least one special deal whose [startDate, endDate] window
          contains ``now``
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pytz

DAYS_OF_WEEK = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def current_day_of_week(tz_name: str, now: Optional[datetime] = None) -> str:
    """Lowercase weekday name in the given timezone"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(pytz.timezone(tz_name))
    return DAYS_OF_WEEK[local.weekday()]


def _parse_iso(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def active_special_deals(
    deals: Dict[str, Any], now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    active = []
    for deal in deals.get("special") or []:
        start = _parse_iso(deal.get("startDate"))
        end = _parse_iso(deal.get("endDate"))
        # open-ended windows count as active
        if start and now < start:
            continue
        if end and now > end:
            continue
        active.append(deal)
    return active


def has_deal(
    deals: Optional[Dict[str, Any]],
    deal_type: str,
    day_of_week: str,
    now: Optional[datetime] = None,
) -> bool:
    if not deals:
        return False

    if deal_type == "birthday":
        return bool(deals.get("birthday"))
    if deal_type == "daily":
        daily = deals.get("daily") or {}
        return len(daily.get(day_of_week) or []) > 0
    if deal_type == "special":
        return len(active_special_deals(deals, now)) > 0
    return False
