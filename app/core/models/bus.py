"""School buses and their maintenance history."""
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import BusStatus
from app.db.session import Base


class Bus(Base):
    __tablename__ = "buses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bus_number = Column(String(50), nullable=False, unique=True)
    registration_number = Column(String(50), nullable=False, unique=True)
    driver_name = Column(String(255), nullable=True)
    driver_contact = Column(String(50), nullable=True)
    route_name = Column(String(255), nullable=True)
    capacity = Column(Integer, nullable=True)
    insurance_expiry = Column(Date, nullable=True)
    # Fitness certificate
    fc_expiry = Column(Date, nullable=True)
    permit_expiry = Column(Date, nullable=True)
    status = Column(String(30), nullable=False, default=BusStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    maintenance_records = relationship(
        "BusMaintenance", back_populates="bus", cascade="all, delete-orphan", passive_deletes=True
    )


class BusMaintenance(Base):
    __tablename__ = "bus_maintenance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bus_id = Column(Integer, ForeignKey("buses.id", ondelete="CASCADE"), nullable=False, index=True)
    maintenance_date = Column(Date, nullable=False)
    maintenance_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    cost = Column(Numeric(12, 2), nullable=True)
    service_provider = Column(String(255), nullable=True)
    next_maintenance_date = Column(Date, nullable=True)
    odometer_reading = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    bus = relationship("Bus", back_populates="maintenance_records")
