from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import DispatchError
from portal.fsm.submission_status import SubmissionStatus, parse_status
from portal.models.notification_log import NotificationLog
from portal.models.submission import Submission
from portal.services.whatsapp_templates import render_template, submission_variables, template_for_status
from portal.whatsapp.base import NotificationChannel, json_safe
from portal.whatsapp.service import get_notification_channel

logger = logging.getLogger(__name__)

CHANNEL_WHATSAPP = "WHATSAPP"
SEND_SUCCESS = "SUCCESS"
SEND_FAILED = "FAILED"


@dataclass
class DispatchResult:
    success: bool
    provider_response: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "providerResponse": self.provider_response}


def _send(channel: NotificationChannel, recipient: str, message: str) -> DispatchResult:
    try:
        result = channel.send(recipient, message)
    except DispatchError as exc:
        logger.warning("notification dispatch failed to=%s error=%s", recipient, exc)
        return DispatchResult(
            success=False,
            provider_response={"error": str(exc), "status_code": exc.status_code},
        )
    except Exception as exc:
        logger.exception("notification channel raised unexpectedly to=%s", recipient)
        return DispatchResult(success=False, provider_response={"error": str(exc)})
    return DispatchResult(success=bool(result.success), provider_response=json_safe(result.raw))


def record_notification(
    db: Session,
    *,
    submission_id: str,
    recipient: str,
    status: SubmissionStatus,
    dispatch: DispatchResult,
    channel: str = CHANNEL_WHATSAPP,
) -> NotificationLog | None:
    """Append one log row. A storage failure is logged and reported as ``None``."""
    entry = NotificationLog(
        submission_id=submission_id,
        channel=channel,
        send_status=SEND_SUCCESS if dispatch.success else SEND_FAILED,
        payload={
            "to": recipient,
            "status": status.value,
            "result": json_safe(dispatch.to_dict()),
        },
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "notification log write failed",
            extra={"submission_id": submission_id, "event": "notification_log.failed"},
        )
        return None
    return entry


def dispatch_submission_notification(
    db: Session,
    submission: Submission,
    *,
    status: SubmissionStatus | None = None,
    channel: NotificationChannel | None = None,
) -> DispatchResult:
    """Send the message for ``status`` and append exactly one log row."""
    current = status or parse_status(submission.status) or SubmissionStatus.PENGAJUAN_BARU
    recipient = submission.no_wa
    channel = channel or get_notification_channel()

    message = render_template(template_for_status(current), submission_variables(submission, current))
    dispatch = _send(channel, recipient, message)
    record_notification(
        db,
        submission_id=submission.id,
        recipient=recipient,
        status=current,
        dispatch=dispatch,
    )
    logger.info(
        "notification dispatched: %s",
        SEND_SUCCESS if dispatch.success else SEND_FAILED,
        extra={"tracking_code": submission.tracking_code, "submission_id": submission.id},
    )
    return dispatch


def dispatch_initial(
    db: Session,
    submission: Submission,
    *,
    channel: NotificationChannel | None = None,
) -> DispatchResult:
    return dispatch_submission_notification(
        db,
        submission,
        status=SubmissionStatus.PENGAJUAN_BARU,
        channel=channel,
    )


def list_notification_logs(db: Session, submission_id: str) -> list[NotificationLog]:
    return (
        db.query(NotificationLog)
        .filter(NotificationLog.submission_id == submission_id)
        .order_by(NotificationLog.created_at.asc())
        .all()
    )
