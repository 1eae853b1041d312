from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, String, event
from sqlalchemy.orm import relationship

from portal.core.database import Base
from portal.models._common import new_uuid, utcnow

CHANNELS = ("WHATSAPP", "EMAIL")
SEND_STATUSES = ("SUCCESS", "FAILED")


class NotificationLog(Base):
    """Append-only record of one dispatch attempt. Rows are never updated."""

    __tablename__ = "notification_logs"

    id = Column(String(36), primary_key=True, default=new_uuid)
    submission_id = Column(String(36), ForeignKey("submissions.id"), nullable=False)
    channel = Column(String(20), nullable=False)
    send_status = Column(String(20), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    submission = relationship("Submission", back_populates="notification_logs")


Index("ix_notification_logs_submission_created", NotificationLog.submission_id, NotificationLog.created_at)


@event.listens_for(NotificationLog, "before_update")
def _reject_log_mutation(_mapper, _connection, target: NotificationLog) -> None:
    raise RuntimeError(f"notification log {target.id} is append-only")
