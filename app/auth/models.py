from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db.session import Base


class Admin(Base):
    """The single administrative account type. Logs in with ``admin_id`` + password."""

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(String(50), nullable=False, unique=True)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    password_hash = Column(Text, nullable=False)
    # Password reset: random hex token, valid until reset_token_expiry
    reset_token = Column(String(128), nullable=True, index=True)
    reset_token_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
