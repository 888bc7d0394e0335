from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime, timezone
from aisentinel.model.base import Base


class EmailVerificationToken(Base):
    """One-time token proving control of an email address"""
    __tablename__ = "email_verification_tokens"
    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, index=True)
    token = Column(String, unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None), nullable=False)
