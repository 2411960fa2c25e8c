from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.enums import BusStatus
from app.core.schemas import FormPayload


class BusBase(FormPayload):
    driver_name: Optional[str] = Field(None, max_length=255)
    driver_contact: Optional[str] = Field(None, max_length=50)
    route_name: Optional[str] = Field(None, max_length=255)
    capacity: Optional[int] = Field(None, ge=0)
    insurance_expiry: Optional[date] = None
    fc_expiry: Optional[date] = None
    permit_expiry: Optional[date] = None


class BusCreate(BusBase):
    bus_number: str = Field(..., min_length=1, max_length=50)
    registration_number: str = Field(..., min_length=1, max_length=50)
    status: BusStatus = BusStatus.ACTIVE


class BusUpdate(BusBase):
    bus_number: Optional[str] = Field(None, min_length=1, max_length=50)
    registration_number: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[BusStatus] = None


class BusResponse(BaseModel):
    id: int
    bus_number: str
    registration_number: str
    driver_name: Optional[str] = None
    driver_contact: Optional[str] = None
    route_name: Optional[str] = None
    capacity: Optional[int] = None
    insurance_expiry: Optional[date] = None
    fc_expiry: Optional[date] = None
    permit_expiry: Optional[date] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DocumentAlert(BaseModel):
    type: str
    message: str
    expiryDate: date
    daysUntilExpiry: int
    severity: str


class BusWithAlertsResponse(BusResponse):
    alerts: List[DocumentAlert]


class MaintenanceBase(FormPayload):
    description: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    service_provider: Optional[str] = Field(None, max_length=255)
    next_maintenance_date: Optional[date] = None
    odometer_reading: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None


class MaintenanceCreate(MaintenanceBase):
    bus_id: int
    maintenance_date: date
    maintenance_type: str = Field(..., min_length=1, max_length=100)


class MaintenanceUpdate(MaintenanceBase):
    maintenance_date: Optional[date] = None
    maintenance_type: Optional[str] = Field(None, min_length=1, max_length=100)


class MaintenanceResponse(BaseModel):
    id: int
    bus_id: int
    bus_number: str
    registration_number: str
    maintenance_date: date
    maintenance_type: str
    description: Optional[str] = None
    cost: Optional[float] = None
    service_provider: Optional[str] = None
    next_maintenance_date: Optional[date] = None
    odometer_reading: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
