from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.deps import get_current_admin
from portal.models.admin import Admin
from portal.routers.submissions import submission_detail
from portal.schemas.submission import StatusUpdate
from portal.services.submission_events import (
    build_submission_payload,
    emit_submission_status_changed,
)
from portal.services.submissions import submission_to_dict, update_submission_status

router = APIRouter(prefix="/api/admin/submissions", tags=["admin-submissions"])
logger = logging.getLogger(__name__)


@router.get("/{submission_id}")
def get_submission_detail(
    submission_id: str,
    db: Session = Depends(get_db),
    _admin: Admin = Depends(get_current_admin),
):
    return {"success": True, "data": submission_detail(db, submission_id)}


@router.patch("/{submission_id}/status")
def update_status(
    submission_id: str,
    body: StatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    submission, previous_status = update_submission_status(db, submission_id, body.status)
    if submission.status != previous_status:
        logger.info(
            "status updated by admin=%s",
            admin.username,
            extra={"tracking_code": submission.tracking_code, "submission_id": submission.id},
        )
        background_tasks.add_task(
            emit_submission_status_changed,
            build_submission_payload(submission, previous_status=previous_status),
        )
    return {
        "success": True,
        "previous_status": previous_status,
        "data": submission_to_dict(submission),
    }
