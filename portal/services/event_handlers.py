from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from portal.core.database import SessionLocal
from portal.fsm.submission_status import parse_status
from portal.models.submission import Submission
from portal.services.event_bus import event_bus
from portal.services.notifications import dispatch_initial, dispatch_submission_notification
from portal.services.submission_events import SUBMISSION_CREATED, SUBMISSION_STATUS_CHANGED

logger = logging.getLogger(__name__)


def _with_session(handler):
    def wrapper(payload: dict) -> None:
        db: Session = SessionLocal()
        try:
            handler(db, payload)
        finally:
            db.close()

    wrapper.__name__ = handler.__name__
    return wrapper


def _load_submission(db: Session, payload: dict) -> Submission | None:
    submission = db.query(Submission).filter(Submission.id == payload["submission_id"]).first()
    if submission is None:
        logger.error(
            "submission vanished before notification",
            extra={"submission_id": payload["submission_id"], "tracking_code": payload.get("tracking_code")},
        )
    return submission


@_with_session
def handle_submission_created(db: Session, payload: dict) -> None:
    submission = _load_submission(db, payload)
    if submission is None:
        return
    dispatch_initial(db, submission)


@_with_session
def handle_submission_status_changed(db: Session, payload: dict) -> None:
    status = parse_status(payload.get("status"))
    if status is None:
        return
    submission = _load_submission(db, payload)
    if submission is None:
        return
    dispatch_submission_notification(db, submission, status=status)


event_bus.subscribe(SUBMISSION_CREATED, handle_submission_created)
event_bus.subscribe(SUBMISSION_STATUS_CHANGED, handle_submission_status_changed)
