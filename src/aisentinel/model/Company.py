from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime, timezone
from aisentinel.model.base import Base


class Company(Base):
    """Tenant organization; email domain drives automatic membership"""
    __tablename__ = "companies"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    domain = Column(String, unique=True, nullable=True)  # e.g. "acme.com"
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
