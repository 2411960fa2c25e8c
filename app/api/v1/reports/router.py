from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.enums import ReportKind
from app.db.session import get_db

from . import service
from .schemas import StaffReportFilters, StudentReportFilters, TransportReportFilters

router = APIRouter(
    prefix="/api/admin/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_admin)],
)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def student_filters(
    class_name: Optional[str] = Query(None, alias="class"),
    section: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
) -> StudentReportFilters:
    return StudentReportFilters(
        class_name=class_name, section=section, status=status, from_date=from_date, to_date=to_date
    )


def staff_filters(
    designation: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    class_name: Optional[str] = Query(None, alias="class"),
    section: Optional[str] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
) -> StaffReportFilters:
    return StaffReportFilters(
        designation=designation,
        status=status,
        class_name=class_name,
        section=section,
        from_date=from_date,
        to_date=to_date,
    )


def transport_filters(
    status: Optional[str] = Query(None),
    route: Optional[str] = Query(None),
) -> TransportReportFilters:
    return TransportReportFilters(status=status, route=route)


@router.get("/students")
async def student_report(
    filters: StudentReportFilters = Depends(student_filters),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await service.student_report(db, filters)


@router.get("/staff")
async def staff_report(
    filters: StaffReportFilters = Depends(staff_filters),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await service.staff_report(db, filters)


@router.get("/transport")
async def transport_report(
    filters: TransportReportFilters = Depends(transport_filters),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await service.transport_report(db, filters)


@router.get("/{kind}/export")
async def export_report(
    kind: ReportKind,
    students: StudentReportFilters = Depends(student_filters),
    staff: StaffReportFilters = Depends(staff_filters),
    transport: TransportReportFilters = Depends(transport_filters),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Download a report as an .xlsx workbook; takes the same filters as the JSON report."""
    if kind == ReportKind.STUDENTS:
        bundle = await service.student_report(db, students)
    elif kind == ReportKind.STAFF:
        bundle = await service.staff_report(db, staff)
    else:
        bundle = await service.transport_report(db, transport)
    return Response(
        content=service.build_report_workbook(kind, bundle),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={kind.value}_report.xlsx"},
    )
