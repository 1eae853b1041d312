from sqlalchemy import Boolean, Column, DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship

from portal.core.database import Base
from portal.models._common import new_uuid, utcnow


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (UniqueConstraint("tracking_code", name="uq_submissions_tracking_code"),)

    id = Column(String(36), primary_key=True, default=new_uuid)
    tracking_code = Column(String(40), nullable=False)
    nama = Column(String, nullable=False)
    nik = Column(String(16), nullable=False)
    email = Column(String, nullable=True)
    no_wa = Column(String, nullable=False)
    jenis_layanan = Column(String, nullable=False)
    consent = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default="PENGAJUAN_BARU")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    notification_logs = relationship(
        "NotificationLog",
        back_populates="submission",
        order_by="NotificationLog.created_at",
    )


Index("ix_submissions_status_created", Submission.status, Submission.created_at)
