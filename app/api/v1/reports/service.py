"""Fetch rows for the report builders and render bundles as spreadsheets."""
import io
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from openpyxl import Workbook
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.faculty.service import list_faculty
from app.api.v1.students.service import list_students
from app.api.v1.transport.service import bus_rows, maintenance_rows_for_bus
from app.core.clock import utcnow
from app.core.enums import ReportKind
from app.core.exceptions import BackendError
from app.core.report_aggregator import (
    build_staff_report,
    build_student_report,
    build_transport_report,
    empty_maintenance_rollup,
    maintenance_rollup,
)

from .schemas import StaffReportFilters, StudentReportFilters, TransportReportFilters

logger = logging.getLogger(__name__)

DATA_SHEET_TITLES = {
    ReportKind.STUDENTS: "Students",
    ReportKind.STAFF: "Staff",
    ReportKind.TRANSPORT: "Transport",
}
STATISTICS_SHEET_TITLE = "Statistics"


def _filter_dict(filters: BaseModel) -> Dict[str, Any]:
    data = filters.model_dump(by_alias=True)
    for key in ("from_date", "to_date"):
        if data.get(key) is not None:
            data[key] = data[key].isoformat()
    return data


async def student_report(
    db: AsyncSession, filters: StudentReportFilters, now: Optional[datetime] = None
) -> Dict[str, Any]:
    rows = [s.model_dump(by_alias=True) for s in await list_students(db)]
    return build_student_report(rows, _filter_dict(filters), now=now or utcnow())


async def staff_report(
    db: AsyncSession, filters: StaffReportFilters, now: Optional[datetime] = None
) -> Dict[str, Any]:
    rows = [f.model_dump(by_alias=True) for f in await list_faculty(db)]
    return build_staff_report(rows, _filter_dict(filters), now=now or utcnow())


async def _bus_maintenance(db: AsyncSession, bus_id: int) -> List[Dict[str, Any]]:
    try:
        return await maintenance_rows_for_bus(db, bus_id)
    except SQLAlchemyError as e:
        await db.rollback()
        raise BackendError(f"Maintenance lookup failed for bus {bus_id}") from e


async def _maintenance_rollups(db: AsyncSession, buses: List[Dict[str, Any]]) -> Dict[int, Dict[str, Any]]:
    """Per-bus maintenance rollups; a failed lookup zeroes that bus only."""
    rollups: Dict[int, Dict[str, Any]] = {}
    for bus in buses:
        try:
            records = await _bus_maintenance(db, bus["id"])
        except BackendError:
            logger.warning(
                "Maintenance lookup failed for bus id=%s number=%s; reporting zeroed maintenance",
                bus["id"],
                bus.get("bus_number"),
                exc_info=True,
            )
            rollups[bus["id"]] = empty_maintenance_rollup()
            continue
        rollups[bus["id"]] = maintenance_rollup(records)
    return rollups


async def transport_report(
    db: AsyncSession, filters: TransportReportFilters, now: Optional[datetime] = None
) -> Dict[str, Any]:
    buses = await bus_rows(db)
    rollups = await _maintenance_rollups(db, buses)
    return build_transport_report(buses, filters.model_dump(), rollups=rollups, now=now or utcnow())


def _cell(value: Any) -> Any:
    # Excel has no timezone support
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, (date, int, float, str)) or value is None:
        return value
    if isinstance(value, (list, dict)):
        return len(value)
    return str(value)


def _statistics_rows(statistics: Dict[str, Any], prefix: str = ""):
    for key, value in statistics.items():
        label = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _statistics_rows(value, prefix=f"{label}.")
        else:
            yield [label, _cell(value)]


def build_report_workbook(kind: ReportKind, bundle: Dict[str, Any]) -> bytes:
    """Data rows on the first sheet, flattened statistics on the second.

    Grouped statistics export as per-group counts.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = DATA_SHEET_TITLES[kind]
    rows = bundle["data"]
    if not rows:
        ws.append(["No records"])
    else:
        headers: List[str] = []
        for row in rows:
            for key in row:
                if key not in headers:
                    headers.append(key)
        ws.append(headers)
        for row in rows:
            ws.append([_cell(row.get(h)) for h in headers])

    ws_stats = wb.create_sheet(STATISTICS_SHEET_TITLE)
    ws_stats.append(["metric", "value"])
    ws_stats.append(["generatedAt", _cell(bundle["generatedAt"])])
    for line in _statistics_rows(bundle["statistics"]):
        ws_stats.append(line)

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()
