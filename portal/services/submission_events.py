from __future__ import annotations

from portal.models.submission import Submission
from portal.services.event_bus import event_bus

SUBMISSION_CREATED = "submission.created"
SUBMISSION_STATUS_CHANGED = "submission.status.changed"


def build_submission_payload(submission: Submission, previous_status: str | None = None) -> dict:
    return {
        "submission_id": submission.id,
        "tracking_code": submission.tracking_code,
        "status": submission.status,
        "previous_status": previous_status,
    }


def emit_submission_created(payload: dict) -> None:
    event_bus.emit(SUBMISSION_CREATED, payload)


def emit_submission_status_changed(payload: dict) -> None:
    if payload.get("previous_status") == payload.get("status"):
        return
    event_bus.emit(SUBMISSION_STATUS_CHANGED, payload)
