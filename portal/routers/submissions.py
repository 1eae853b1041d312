from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.errors import InternalError, PortalError
from portal.services.notifications import list_notification_logs
from portal.services.submission_events import (
    build_submission_payload,
    emit_submission_created,
)
from portal.services.submission_listing import list_submissions
from portal.services.submissions import (
    create_submission,
    get_submission,
    submission_to_dict,
    submission_to_public,
)
from portal.schemas.submission import SubmissionCreate

router = APIRouter(prefix="/api", tags=["submissions"])
logger = logging.getLogger(__name__)

LIST_CACHE_CONTROL = "private, max-age=30, stale-while-revalidate=60"


def notification_log_to_dict(entry) -> dict:
    return {
        "id": entry.id,
        "submission_id": entry.submission_id,
        "channel": entry.channel,
        "send_status": entry.send_status,
        "payload": entry.payload,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
    }


@router.post("/submissions", status_code=status.HTTP_201_CREATED)
def create_submission_endpoint(
    payload: SubmissionCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    try:
        submission = create_submission(db, payload.model_dump())
    except PortalError:
        raise
    except Exception as exc:
        db.rollback()
        raise InternalError() from exc

    # The row is committed; notification outcome no longer affects the response.
    background_tasks.add_task(emit_submission_created, build_submission_payload(submission))

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "message": "Pengajuan berhasil dibuat",
            "tracking_code": submission.tracking_code,
            "submission": submission_to_dict(submission),
        },
    )


@router.get("/submissions")
def list_submissions_endpoint(
    response: Response,
    q: Optional[str] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    logger.info(
        "listing submissions q=%s sort=%s order=%s page=%s limit=%s status=%s",
        q,
        sort,
        order,
        page,
        limit,
        status,
    )
    try:
        result = list_submissions(
            db,
            search=q,
            status=status,
            sort=sort,
            order=order,
            page=page,
            limit=limit,
        )
    except Exception as exc:
        raise InternalError() from exc

    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return result


@router.get("/submissions/{reference}")
def track_submission(reference: str, db: Session = Depends(get_db)):
    submission = get_submission(db, reference)
    return {"success": True, "data": submission_to_public(submission)}


def submission_detail(db: Session, reference: str) -> dict:
    submission = get_submission(db, reference)
    data = submission_to_dict(submission)
    data["notification_logs"] = [
        notification_log_to_dict(entry) for entry in list_notification_logs(db, submission.id)
    ]
    return data
