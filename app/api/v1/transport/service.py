from datetime import date, datetime
from typing import Any, Dict, List, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.clock import utcnow
from app.core.exceptions import ConflictError, NotFoundError
from app.core.expiry_alerts import DEFAULT_HORIZON_MONTHS, buses_with_alerts
from app.core.models import Bus, BusMaintenance
from app.core.report_aggregator import sort_by_bus_number

from .schemas import (
    BusCreate,
    BusResponse,
    BusUpdate,
    BusWithAlertsResponse,
    MaintenanceCreate,
    MaintenanceResponse,
    MaintenanceUpdate,
)

DUPLICATE_BUS_MESSAGE = "Bus number or registration number already exists"

_BUS_FIELDS = (
    "bus_number", "registration_number", "driver_name", "driver_contact", "route_name",
    "capacity", "insurance_expiry", "fc_expiry", "permit_expiry",
)
_MAINTENANCE_FIELDS = (
    "maintenance_date", "maintenance_type", "description", "cost", "service_provider",
    "next_maintenance_date", "odometer_reading", "notes",
)


def _bus_to_response(b: Bus) -> BusResponse:
    return BusResponse.model_validate(b)


def _maintenance_to_response(m: BusMaintenance) -> MaintenanceResponse:
    return MaintenanceResponse(
        id=m.id,
        bus_id=m.bus_id,
        bus_number=m.bus.bus_number,
        registration_number=m.bus.registration_number,
        maintenance_date=m.maintenance_date,
        maintenance_type=m.maintenance_type,
        description=m.description,
        cost=float(m.cost) if m.cost is not None else None,
        service_provider=m.service_provider,
        next_maintenance_date=m.next_maintenance_date,
        odometer_reading=m.odometer_reading,
        notes=m.notes,
        created_at=m.created_at,
    )


def bus_row(b: Bus) -> Dict[str, Any]:
    """Plain dict of a bus for aggregation and export."""
    return _bus_to_response(b).model_dump()


# ----- buses -----

async def list_buses(db: AsyncSession) -> List[BusResponse]:
    result = await db.execute(select(Bus).order_by(Bus.created_at.desc()))
    rows = sort_by_bus_number(result.scalars().all(), key=lambda b: b.bus_number)
    return [_bus_to_response(b) for b in rows]


async def get_bus(db: AsyncSession, bus_id: int) -> Optional[BusResponse]:
    obj = await db.get(Bus, bus_id)
    return _bus_to_response(obj) if obj else None


async def create_bus(db: AsyncSession, payload: BusCreate) -> BusResponse:
    obj = Bus(status=payload.status.value)
    for field in _BUS_FIELDS:
        setattr(obj, field, getattr(payload, field))
    obj.bus_number = payload.bus_number.strip()
    obj.registration_number = payload.registration_number.strip()
    try:
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return _bus_to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_BUS_MESSAGE)


async def update_bus(db: AsyncSession, bus_id: int, payload: BusUpdate) -> Optional[BusResponse]:
    obj = await db.get(Bus, bus_id)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)
    for field in _BUS_FIELDS:
        if field not in data:
            continue
        if field in ("bus_number", "registration_number"):
            if data[field]:
                setattr(obj, field, data[field].strip())
            continue
        setattr(obj, field, data[field])
    if data.get("status") is not None:
        obj.status = data["status"].value
    try:
        await db.commit()
        await db.refresh(obj)
        return _bus_to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_BUS_MESSAGE)


async def delete_bus(db: AsyncSession, bus_id: int) -> bool:
    obj = await db.get(Bus, bus_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


async def list_buses_with_alerts(
    db: AsyncSession,
    months: int = DEFAULT_HORIZON_MONTHS,
    now: Optional[datetime] = None,
) -> List[BusWithAlertsResponse]:
    """Buses with a document expiring between today and today + ``months``, with their alerts.

    Ordered by the first in-window expiry (insurance, then fc, then permit).
    """
    now = now or utcnow()
    today = now.date()
    horizon_end = today + relativedelta(months=months)
    in_window = [
        and_(column.isnot(None), column.between(today, horizon_end))
        for column in (Bus.insurance_expiry, Bus.fc_expiry, Bus.permit_expiry)
    ]
    result = await db.execute(select(Bus).where(or_(*in_window)))
    entries = buses_with_alerts(result.scalars().all(), now, months)
    return [
        BusWithAlertsResponse(**bus_row(entry["bus"]), alerts=entry["alerts"])
        for entry in entries
    ]


# ----- maintenance -----

def _maintenance_query():
    return select(BusMaintenance).options(selectinload(BusMaintenance.bus))


async def list_maintenance_records(
    db: AsyncSession,
    bus_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[MaintenanceResponse]:
    """Records of one bus, newest first. Filter by date range, or by calendar month."""
    stmt = _maintenance_query().where(BusMaintenance.bus_id == bus_id)
    if start_date and end_date:
        stmt = stmt.where(BusMaintenance.maintenance_date.between(start_date, end_date))
    elif year and month:
        first = date(year, month, 1)
        stmt = stmt.where(
            BusMaintenance.maintenance_date >= first,
            BusMaintenance.maintenance_date < first + relativedelta(months=1),
        )
    stmt = stmt.order_by(BusMaintenance.maintenance_date.desc(), BusMaintenance.created_at.desc())
    result = await db.execute(stmt)
    return [_maintenance_to_response(m) for m in result.scalars().all()]


async def _load_maintenance(db: AsyncSession, record_id: int) -> Optional[BusMaintenance]:
    result = await db.execute(
        _maintenance_query().where(BusMaintenance.id == record_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_maintenance(db: AsyncSession, record_id: int) -> Optional[MaintenanceResponse]:
    obj = await _load_maintenance(db, record_id)
    return _maintenance_to_response(obj) if obj else None


async def create_maintenance(db: AsyncSession, payload: MaintenanceCreate) -> MaintenanceResponse:
    if not await db.get(Bus, payload.bus_id):
        raise NotFoundError("Bus not found")
    obj = BusMaintenance(bus_id=payload.bus_id)
    for field in _MAINTENANCE_FIELDS:
        setattr(obj, field, getattr(payload, field))
    obj.maintenance_type = payload.maintenance_type.strip()
    db.add(obj)
    await db.commit()
    return _maintenance_to_response(await _load_maintenance(db, obj.id))


async def update_maintenance(
    db: AsyncSession,
    record_id: int,
    payload: MaintenanceUpdate,
) -> Optional[MaintenanceResponse]:
    obj = await db.get(BusMaintenance, record_id)
    if not obj:
        return None
    data = payload.model_dump(exclude_unset=True)
    for field in _MAINTENANCE_FIELDS:
        if field not in data:
            continue
        # Required columns keep their value when blanked
        if field in ("maintenance_date", "maintenance_type") and not data[field]:
            continue
        setattr(obj, field, data[field])
    await db.commit()
    return _maintenance_to_response(await _load_maintenance(db, record_id))


async def delete_maintenance(db: AsyncSession, record_id: int) -> bool:
    obj = await db.get(BusMaintenance, record_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


async def maintenance_rows_for_bus(db: AsyncSession, bus_id: int) -> List[Dict[str, Any]]:
    """Stored-order records of one bus as dicts (used by the transport report)."""
    records = await list_maintenance_records(db, bus_id)
    return [r.model_dump() for r in records]


async def bus_rows(db: AsyncSession) -> List[Dict[str, Any]]:
    """Every bus as a dict, in bus-number order (used by the transport report)."""
    return [b.model_dump() for b in await list_buses(db)]
