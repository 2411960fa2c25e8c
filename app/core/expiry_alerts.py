"""
Bus document expiry alerts.

Each of insurance, fitness certificate (fc) and permit produces at most one
alert per run:

- expired (expiry <= now)              -> critical, daysUntilExpiry 0
- within one month of now              -> urgent
- within the horizon (default 2 months) -> warning
- beyond the horizon                   -> no alert

Severity is recomputed on every call from the injected ``now``.
"""
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

SEVERITY_CRITICAL = "critical"
SEVERITY_URGENT = "urgent"
SEVERITY_WARNING = "warning"

# (type key, model attribute, display name); order matters for candidate sorting
DOCUMENT_TYPES = (
    ("insurance", "insurance_expiry", "Insurance"),
    ("fc", "fc_expiry", "Fitness Certificate"),
    ("permit", "permit_expiry", "Permit"),
)

DEFAULT_HORIZON_MONTHS = 2
URGENT_MONTHS = 1


def field_value(record: Any, name: str) -> Any:
    """Read ``name`` from a dict row or an ORM object."""
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def as_date(value: Any) -> Optional[date]:
    """Coerce a date, datetime or ``YYYY-MM-DD``-prefixed string to a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _utc(now: datetime) -> datetime:
    return now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now.astimezone(timezone.utc)


def _expiry_instant(expiry: date) -> datetime:
    # Stored dates are calendar days; they expire at midnight UTC
    return datetime(expiry.year, expiry.month, expiry.day, tzinfo=timezone.utc)


def days_until(expiry: date, now: datetime) -> int:
    delta = _expiry_instant(expiry) - _utc(now)
    return math.ceil(delta / timedelta(days=1))


def classify_document(
    doc_type: str,
    display_name: str,
    expiry: Optional[date],
    now: datetime,
    months: int = DEFAULT_HORIZON_MONTHS,
) -> Optional[Dict[str, Any]]:
    if expiry is None:
        return None
    now = _utc(now)
    instant = _expiry_instant(expiry)
    if instant <= now:
        return {
            "type": doc_type,
            "message": f"{display_name} has expired",
            "expiryDate": expiry,
            "daysUntilExpiry": 0,
            "severity": SEVERITY_CRITICAL,
        }
    if instant <= now + relativedelta(months=URGENT_MONTHS):
        severity = SEVERITY_URGENT
    elif instant <= now + relativedelta(months=months):
        severity = SEVERITY_WARNING
    else:
        return None
    remaining = days_until(expiry, now)
    return {
        "type": doc_type,
        "message": f"{display_name} expires in {remaining} day(s)",
        "expiryDate": expiry,
        "daysUntilExpiry": remaining,
        "severity": severity,
    }


def classify_bus(bus: Any, now: datetime, months: int = DEFAULT_HORIZON_MONTHS) -> List[Dict[str, Any]]:
    """All alerts (0-3) for one bus."""
    alerts = []
    for doc_type, attr, display_name in DOCUMENT_TYPES:
        alert = classify_document(doc_type, display_name, as_date(field_value(bus, attr)), now, months)
        if alert:
            alerts.append(alert)
    return alerts


def first_in_window_expiry(bus: Any, start: date, end: date) -> Optional[date]:
    """First of insurance/fc/permit expiry (in that order) falling inside [start, end]."""
    for _, attr, _ in DOCUMENT_TYPES:
        expiry = as_date(field_value(bus, attr))
        if expiry is not None and start <= expiry <= end:
            return expiry
    return None


def buses_with_alerts(
    buses: Iterable[Any],
    now: datetime,
    months: int = DEFAULT_HORIZON_MONTHS,
) -> List[Dict[str, Any]]:
    """Candidate buses (some document expiring between today and today + months),
    ordered by their first in-window expiry, each paired with its alerts.

    Buses whose alerts come out empty are dropped.
    """
    today = _utc(now).date()
    horizon_end = today + relativedelta(months=months)
    candidates = []
    for bus in buses:
        first = first_in_window_expiry(bus, today, horizon_end)
        if first is not None:
            candidates.append((first, bus))
    candidates.sort(key=lambda pair: pair[0])

    result = []
    for _, bus in candidates:
        alerts = classify_bus(bus, now, months)
        if alerts:
            result.append({"bus": bus, "alerts": alerts})
    return result


def count_alerts(entries: Iterable[Dict[str, Any]], severity: Optional[str] = None) -> int:
    return sum(
        1
        for entry in entries
        for alert in entry["alerts"]
        if severity is None or alert["severity"] == severity
    )
