from pydantic import BaseModel, Field


class StudentCounts(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    graduated: int = 0


class FacultyCounts(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    retired: int = 0


class TransportCounts(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    under_maintenance: int = Field(0, alias="underMaintenance")

    class Config:
        populate_by_name = True


class AnnouncementCounts(BaseModel):
    total: int = 0
    published: int = 0
    draft: int = 0
    scheduled: int = 0


class AlertCounts(BaseModel):
    total: int = 0
    critical: int = 0
    urgent: int = 0
    buses_with_alerts: int = Field(0, alias="busesWithAlerts")

    class Config:
        populate_by_name = True


class DashboardStats(BaseModel):
    students: StudentCounts
    faculty: FacultyCounts
    transport: TransportCounts
    announcements: AnnouncementCounts
    alerts: AlertCounts
