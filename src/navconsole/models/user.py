from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from navconsole.db import Base


def _utc_now():
    """Helper function for SQLAlchemy default/onupdate."""
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String(256), nullable=False)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    is_system_admin = Column(Boolean, default=False)  # Bypasses grant checks entirely
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    token_version = Column(Integer, default=1, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)
    role = relationship("Role", back_populates="users", lazy="selectin")
