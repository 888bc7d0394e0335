from sqlalchemy import Column, DateTime, Integer, String, ForeignKey
from datetime import datetime, timezone
from aisentinel.model.base import Base


class UserSession(Base):
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True)
    session_token = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    email = Column(String, nullable=False)  # copied from the user at creation time
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
    role_level = Column(Integer, default=1, nullable=False)  # snapshot at creation time
    test_role = Column(String, nullable=True)  # developer impersonation override
    expires_at = Column(DateTime, nullable=False, index=True)
    last_accessed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
