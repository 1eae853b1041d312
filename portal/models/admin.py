from sqlalchemy import Boolean, Column, DateTime, String

from portal.core.database import Base
from portal.models._common import new_uuid, utcnow

ADMIN_ROLES = ("ADMIN", "SUPER_ADMIN")


class Admin(Base):
    __tablename__ = "admins"

    id = Column(String(36), primary_key=True, default=new_uuid)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String, nullable=True, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="ADMIN")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
