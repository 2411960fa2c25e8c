"""
Report aggregation over already-fetched rows.

Rows are plain dicts (column name -> value, with the class column under
"class"). Every builder returns the same bundle shape:
{type, generatedAt, filters, statistics, data}. Bundles are never stored.
"""
import re
from datetime import date, datetime, timezone
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from app.core.class_order import normalize_class_for_compare
from app.core.expiry_alerts import DOCUMENT_TYPES, as_date, buses_with_alerts

Row = Dict[str, Any]

EXPIRING_WINDOW_MONTHS = 2
NOT_SPECIFIED = "Not Specified"

_FIRST_NUMBER = re.compile(r"\d+")
_CHUNKS = re.compile(r"(\d+)")


def _date_prefix(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def in_date_range(value: Any, from_date: Optional[str], to_date: Optional[str]) -> bool:
    """Compare on the YYYY-MM-DD prefix only, so time of day and zone never shift the day."""
    if not from_date and not to_date:
        return True
    day = _date_prefix(value)
    if day is None:
        return False
    if from_date and day < from_date[:10]:
        return False
    if to_date and day > to_date[:10]:
        return False
    return True


def _active_filters(filters: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in filters.items() if v not in (None, "")}


def _apply_common_filters(rows: Iterable[Row], filters: Mapping[str, Any], date_field: str) -> List[Row]:
    result = list(rows)
    class_filter = filters.get("class")
    if class_filter:
        wanted = normalize_class_for_compare(class_filter)
        result = [r for r in result if normalize_class_for_compare(r.get("class")) == wanted]
    for key in ("section", "status", "designation"):
        value = filters.get(key)
        if value:
            result = [r for r in result if r.get(key) == value]
    from_date, to_date = filters.get("from_date"), filters.get("to_date")
    if from_date or to_date:
        result = [r for r in result if in_date_range(r.get(date_field), from_date, to_date)]
    return result


def _group(rows: Iterable[Row], key_fn) -> Dict[str, List[Row]]:
    groups: Dict[str, List[Row]] = {}
    for row in rows:
        key = key_fn(row)
        if key is None:
            continue
        groups.setdefault(key, []).append(row)
    return groups


def _count_status(rows: List[Row], status: str) -> int:
    return sum(1 for r in rows if r.get("status") == status)


def _bundle(kind: str, filters: Mapping[str, Any], statistics: Dict[str, Any], data: List[Row], now: datetime) -> Row:
    return {
        "type": kind,
        "generatedAt": now,
        "filters": _active_filters(filters),
        "statistics": statistics,
        "data": data,
    }


def build_student_report(students: Iterable[Row], filters: Mapping[str, Any], now: Optional[datetime] = None) -> Row:
    now = now or datetime.now(timezone.utc)
    rows = _apply_common_filters(students, filters, "admission_date")
    statistics = {
        "total": len(rows),
        "active": _count_status(rows, "Active"),
        "inactive": _count_status(rows, "Inactive"),
        "graduated": _count_status(rows, "Graduated"),
        "byClass": _group(rows, lambda r: r.get("class") or NOT_SPECIFIED),
        "bySection": _group(rows, lambda r: f"{r.get('class') or ''}-{r.get('section') or ''}"),
    }
    return _bundle("student", filters, statistics, rows, now)


def build_staff_report(faculty: Iterable[Row], filters: Mapping[str, Any], now: Optional[datetime] = None) -> Row:
    now = now or datetime.now(timezone.utc)
    rows = _apply_common_filters(faculty, filters, "joining_date")
    experiences = [float(r["experience"]) for r in rows if r.get("experience") is not None]
    average = round(sum(experiences) / len(experiences), 2) if experiences else 0
    statistics = {
        "total": len(rows),
        "active": _count_status(rows, "Active"),
        "inactive": _count_status(rows, "Inactive"),
        "retired": _count_status(rows, "Retired"),
        "averageExperience": average,
        "byDesignation": _group(rows, lambda r: r.get("designation") or NOT_SPECIFIED),
        "byClass": _group(rows, lambda r: r.get("class") or None),
    }
    return _bundle("staff", filters, statistics, rows, now)


def _parse_cost(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def empty_maintenance_rollup() -> Row:
    return {
        "maintenance_count": 0,
        "total_maintenance_cost": 0.0,
        "last_maintenance_date": None,
        "next_maintenance_date": None,
    }


def maintenance_rollup(records: List[Row]) -> Row:
    """Count, summed cost, most recent date and first scheduled next date of a bus's records.

    ``records`` is in the stored order (maintenance_date desc, created_at desc).
    """
    if not records:
        return empty_maintenance_rollup()
    dates = [as_date(r.get("maintenance_date")) for r in records]
    dates = [d for d in dates if d is not None]
    next_date = next(
        (r.get("next_maintenance_date") for r in records if r.get("next_maintenance_date") is not None),
        None,
    )
    return {
        "maintenance_count": len(records),
        "total_maintenance_cost": sum(_parse_cost(r.get("cost")) for r in records),
        "last_maintenance_date": max(dates) if dates else None,
        "next_maintenance_date": next_date,
    }


def _bus_numeral(bus_number: Any) -> int:
    match = _FIRST_NUMBER.search(str(bus_number or ""))
    return int(match.group(0)) if match else 0


def _natural_key(value: str):
    return [int(part) if part.isdigit() else part.casefold() for part in _CHUNKS.split(value) if part != ""]


def _natural_compare(a: str, b: str) -> int:
    ka, kb = _natural_key(a), _natural_key(b)
    for x, y in zip(ka, kb):
        if x == y:
            continue
        if isinstance(x, int) and isinstance(y, int):
            return -1 if x < y else 1
        sx, sy = str(x), str(y)
        return -1 if sx < sy else 1
    return (len(ka) > len(kb)) - (len(ka) < len(kb))


def compare_bus_numbers(a: Any, b: Any) -> int:
    na, nb = _bus_numeral(a), _bus_numeral(b)
    if na and nb:
        return (na > nb) - (na < nb)
    return _natural_compare(str(a or ""), str(b or ""))


def sort_by_bus_number(items: Iterable[Any], key: Callable[[Any], Any]) -> List[Any]:
    """Order by the numeral in the bus number: Bus-1, Bus-2, Bus-10."""
    return sorted(items, key=cmp_to_key(lambda x, y: compare_bus_numbers(key(x), key(y))))


def sort_buses(buses: Iterable[Row]) -> List[Row]:
    return sort_by_bus_number(buses, key=lambda b: b.get("bus_number"))


def _expiry_buckets(buses: List[Row], now: datetime):
    window_end = now + relativedelta(months=EXPIRING_WINDOW_MONTHS)
    expiring: Dict[str, List[Row]] = {}
    expired: Dict[str, List[Row]] = {}
    for doc_type, attr, _ in DOCUMENT_TYPES:
        expiring[doc_type] = []
        expired[doc_type] = []
        for bus in buses:
            day = as_date(bus.get(attr))
            if day is None:
                continue
            instant = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
            if now <= instant <= window_end:
                expiring[doc_type].append(bus)
            elif instant < now:
                expired[doc_type].append(bus)
    return expiring, expired


def build_transport_report(
    buses: Iterable[Row],
    filters: Mapping[str, Any],
    rollups: Optional[Mapping[Any, Row]] = None,
    now: Optional[datetime] = None,
) -> Row:
    """``rollups`` maps bus id to its maintenance rollup; missing ids get zeroed fields."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    rollups = rollups or {}
    all_buses = [{**bus, **rollups.get(bus.get("id"), empty_maintenance_rollup())} for bus in buses]

    rows = all_buses
    if filters.get("status"):
        rows = [b for b in rows if b.get("status") == filters["status"]]
    if filters.get("route"):
        rows = [b for b in rows if b.get("route_name") == filters["route"]]
    rows = sort_buses(rows)

    expiring, expired = _expiry_buckets(rows, now)
    alerts = [
        {**entry["bus"], "alerts": entry["alerts"]}
        for entry in buses_with_alerts(all_buses, now, EXPIRING_WINDOW_MONTHS)
    ]
    statistics = {
        "total": len(rows),
        "active": _count_status(rows, "Active"),
        "inactive": _count_status(rows, "Inactive"),
        "underMaintenance": _count_status(rows, "Under Maintenance"),
        "totalCapacity": sum(b["capacity"] for b in rows if b.get("capacity") is not None),
        "expiringDocuments": {k: len(v) for k, v in expiring.items()},
        "expiredDocuments": {k: len(v) for k, v in expired.items()},
        "totalMaintenanceCost": sum(b["total_maintenance_cost"] for b in rows),
        "byRoute": _group(rows, lambda b: b.get("route_name") or None),
    }
    bundle = _bundle("transport", filters, statistics, rows, now)
    bundle["maintenanceAlerts"] = alerts
    bundle["expiringDetails"] = expiring
    bundle["expiredDetails"] = expired
    return bundle
