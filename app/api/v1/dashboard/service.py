from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.transport.service import list_buses_with_alerts
from app.core.enums import AnnouncementStatus, BusStatus, FacultyStatus, StudentStatus
from app.core.expiry_alerts import DEFAULT_HORIZON_MONTHS, SEVERITY_CRITICAL, SEVERITY_URGENT, count_alerts
from app.core.models import Announcement, Bus, Faculty, Student

from .schemas import (
    AlertCounts,
    AnnouncementCounts,
    DashboardStats,
    FacultyCounts,
    StudentCounts,
    TransportCounts,
)


async def _status_counts(db: AsyncSession, model) -> Dict[str, int]:
    result = await db.execute(select(model.status, func.count(model.id)).group_by(model.status))
    return {status: count for status, count in result.all()}


async def get_dashboard_stats(db: AsyncSession, now: Optional[datetime] = None) -> DashboardStats:
    """Counts by status for each collection plus bus document alert totals.

    Every fetch runs inside the same session; any failure aborts the whole response.
    """
    students = await _status_counts(db, Student)
    faculty = await _status_counts(db, Faculty)
    buses = await _status_counts(db, Bus)
    announcements = await _status_counts(db, Announcement)
    alerted = await list_buses_with_alerts(db, months=DEFAULT_HORIZON_MONTHS, now=now)

    entries = [bus.model_dump() for bus in alerted]
    return DashboardStats(
        students=StudentCounts(
            total=sum(students.values()),
            active=students.get(StudentStatus.ACTIVE.value, 0),
            inactive=students.get(StudentStatus.INACTIVE.value, 0),
            graduated=students.get(StudentStatus.GRADUATED.value, 0),
        ),
        faculty=FacultyCounts(
            total=sum(faculty.values()),
            active=faculty.get(FacultyStatus.ACTIVE.value, 0),
            inactive=faculty.get(FacultyStatus.INACTIVE.value, 0),
            retired=faculty.get(FacultyStatus.RETIRED.value, 0),
        ),
        transport=TransportCounts(
            total=sum(buses.values()),
            active=buses.get(BusStatus.ACTIVE.value, 0),
            inactive=buses.get(BusStatus.INACTIVE.value, 0),
            under_maintenance=buses.get(BusStatus.UNDER_MAINTENANCE.value, 0),
        ),
        announcements=AnnouncementCounts(
            total=sum(announcements.values()),
            published=announcements.get(AnnouncementStatus.PUBLISHED.value, 0),
            draft=announcements.get(AnnouncementStatus.DRAFT.value, 0),
            scheduled=announcements.get(AnnouncementStatus.SCHEDULED.value, 0),
        ),
        alerts=AlertCounts(
            total=count_alerts(entries),
            critical=count_alerts(entries, SEVERITY_CRITICAL),
            urgent=count_alerts(entries, SEVERITY_URGENT),
            buses_with_alerts=len(alerted),
        ),
    )
