from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from datetime import datetime, timezone
from aisentinel.model.base import Base


class CompanyEmployee(Base):
    """Pre-provisioned employee record used to assign a role on first login"""
    __tablename__ = "company_employees"
    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), index=True)
    email = Column(String, nullable=False, index=True)
    role = Column(String, default="employee", nullable=False)  # employee, admin, administrator, owner
    department = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    added_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
