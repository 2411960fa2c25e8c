from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_admin
from app.core.config import settings
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    BusCreate,
    BusResponse,
    BusUpdate,
    BusWithAlertsResponse,
    MaintenanceCreate,
    MaintenanceResponse,
    MaintenanceUpdate,
)

router = APIRouter(
    prefix="/api/transport",
    tags=["transport"],
    dependencies=[Depends(get_current_admin)],
)


# ----- buses -----

@router.get("/buses", response_model=List[BusResponse])
async def list_buses(db: AsyncSession = Depends(get_db)) -> List[BusResponse]:
    return await service.list_buses(db)


@router.get("/buses/alerts", response_model=List[BusWithAlertsResponse])
async def list_buses_with_alerts(
    months: Optional[int] = Query(None, ge=1, le=24, description="Look-ahead window in months"),
    db: AsyncSession = Depends(get_db),
) -> List[BusWithAlertsResponse]:
    return await service.list_buses_with_alerts(db, months or settings.alert_horizon_months)


@router.get("/buses/{bus_id}", response_model=BusResponse)
async def get_bus(bus_id: int, db: AsyncSession = Depends(get_db)) -> BusResponse:
    obj = await service.get_bus(db, bus_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
    return obj


@router.post("/buses", response_model=BusResponse, status_code=status.HTTP_201_CREATED)
async def create_bus(payload: BusCreate, db: AsyncSession = Depends(get_db)) -> BusResponse:
    try:
        return await service.create_bus(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/buses/{bus_id}", response_model=BusResponse)
async def update_bus(bus_id: int, payload: BusUpdate, db: AsyncSession = Depends(get_db)) -> BusResponse:
    try:
        obj = await service.update_bus(db, bus_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/buses/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bus(bus_id: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_bus(db, bus_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")


# ----- maintenance -----

@router.get("/maintenance/bus/{bus_id}", response_model=List[MaintenanceResponse])
async def list_maintenance_records(
    bus_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> List[MaintenanceResponse]:
    return await service.list_maintenance_records(
        db, bus_id, start_date=start_date, end_date=end_date, year=year, month=month
    )


@router.get("/maintenance/{record_id}", response_model=MaintenanceResponse)
async def get_maintenance(record_id: int, db: AsyncSession = Depends(get_db)) -> MaintenanceResponse:
    obj = await service.get_maintenance(db, record_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance record not found")
    return obj


@router.post("/maintenance", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance(payload: MaintenanceCreate, db: AsyncSession = Depends(get_db)) -> MaintenanceResponse:
    try:
        return await service.create_maintenance(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/maintenance/{record_id}", response_model=MaintenanceResponse)
async def update_maintenance(
    record_id: int,
    payload: MaintenanceUpdate,
    db: AsyncSession = Depends(get_db),
) -> MaintenanceResponse:
    obj = await service.update_maintenance(db, record_id, payload)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance record not found")
    return obj


@router.delete("/maintenance/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance(record_id: int, db: AsyncSession = Depends(get_db)) -> None:
    if not await service.delete_maintenance(db, record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance record not found")
