from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core import config
from portal.core.errors import ConflictError, NotFoundError, ValidationError
from portal.fsm.submission_status import (
    INITIAL_STATUS,
    InvalidTransition,
    STATUS_LABELS,
    next_status,
    parse_status,
)
from portal.models.submission import Submission
from portal.services.phone import normalize_phone
from portal.services.submission_validator import validate_submission
from portal.services.tracking_code import generate_tracking_code

logger = logging.getLogger(__name__)

TRACKING_CODE_CONSTRAINT = "tracking_code"


def _is_tracking_code_conflict(exc: IntegrityError) -> bool:
    return TRACKING_CODE_CONSTRAINT in str(getattr(exc, "orig", exc)).lower()


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def create_submission(
    db: Session,
    payload: Mapping[str, Any],
    *,
    code_generator: Callable[[], str] = generate_tracking_code,
    max_attempts: int | None = None,
) -> Submission:
    """Persist a new submission in ``PENGAJUAN_BARU``.

    A tracking code collision is retried with a fresh code; once
    ``max_attempts`` codes collided, ``ConflictError`` is raised and nothing
    is overwritten.
    """
    errors = validate_submission(payload)
    if errors:
        raise ValidationError(errors)

    attempts = max_attempts or config.TRACKING_CODE_MAX_ATTEMPTS
    no_wa = normalize_phone(payload.get("no_wa"))

    for attempt in range(1, attempts + 1):
        submission = Submission(
            tracking_code=code_generator(),
            nama=_clean(payload.get("nama")),
            nik=_clean(payload.get("nik")),
            email=_clean(payload.get("email")),
            no_wa=no_wa,
            jenis_layanan=_clean(payload.get("jenis_layanan")),
            consent=True,
            status=INITIAL_STATUS.value,
        )
        db.add(submission)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if not _is_tracking_code_conflict(exc):
                raise
            logger.warning(
                "tracking code collision attempt=%s/%s",
                attempt,
                attempts,
                extra={"tracking_code": submission.tracking_code},
            )
            continue

        db.refresh(submission)
        logger.info(
            "submission created",
            extra={"tracking_code": submission.tracking_code, "submission_id": submission.id},
        )
        return submission

    raise ConflictError()


def find_submission(db: Session, reference: str) -> Submission | None:
    reference = (reference or "").strip()
    if not reference:
        return None
    return (
        db.query(Submission)
        .filter(or_(Submission.id == reference, Submission.tracking_code == reference))
        .first()
    )


def get_submission(db: Session, reference: str) -> Submission:
    submission = find_submission(db, reference)
    if submission is None:
        raise NotFoundError("Pengajuan tidak ditemukan")
    return submission


def update_submission_status(
    db: Session,
    submission_id: str,
    new_status: str,
    *,
    enforce: bool | None = None,
) -> tuple[Submission, str]:
    """Move a submission to ``new_status``; returns it with the previous status."""
    target = parse_status(new_status)
    if target is None:
        raise ValidationError({"status": "Status tidak valid"})

    submission = db.query(Submission).filter(Submission.id == submission_id).first()
    if submission is None:
        raise NotFoundError("Pengajuan tidak ditemukan")

    previous = submission.status
    current = parse_status(previous)
    enforce_transitions = config.ENFORCE_STATUS_TRANSITIONS if enforce is None else enforce
    if current is None:
        # Legacy rows with a value outside the fixed set can only be overwritten.
        resolved = target
    else:
        try:
            resolved = next_status(current, target, enforce=enforce_transitions)
        except InvalidTransition as exc:
            raise ValidationError(
                {
                    "status": (
                        f"Status tidak dapat diubah dari {STATUS_LABELS[exc.current]} "
                        f"ke {STATUS_LABELS[exc.target]}"
                    )
                }
            ) from exc

    if resolved.value == previous:
        return submission, previous

    submission.status = resolved.value
    db.commit()
    db.refresh(submission)
    logger.info(
        "submission status changed %s -> %s",
        previous,
        submission.status,
        extra={"tracking_code": submission.tracking_code, "submission_id": submission.id},
    )
    return submission, previous


def submission_to_dict(submission: Submission) -> dict[str, Any]:
    return {
        "id": submission.id,
        "tracking_code": submission.tracking_code,
        "nama": submission.nama,
        "nik": submission.nik,
        "email": submission.email,
        "no_wa": submission.no_wa,
        "jenis_layanan": submission.jenis_layanan,
        "consent": bool(submission.consent),
        "status": submission.status,
        "created_at": submission.created_at.isoformat() if submission.created_at else None,
        "updated_at": submission.updated_at.isoformat() if submission.updated_at else None,
    }


def submission_to_summary(submission: Submission) -> dict[str, Any]:
    return {
        "id": submission.id,
        "tracking_code": submission.tracking_code,
        "nama": submission.nama,
        "email": submission.email,
        "jenis_layanan": submission.jenis_layanan,
        "status": submission.status,
        "created_at": submission.created_at.isoformat() if submission.created_at else None,
        "updated_at": submission.updated_at.isoformat() if submission.updated_at else None,
    }


def submission_to_public(submission: Submission) -> dict[str, Any]:
    status = parse_status(submission.status)
    return {
        "tracking_code": submission.tracking_code,
        "jenis_layanan": submission.jenis_layanan,
        "status": submission.status,
        "status_label": STATUS_LABELS[status] if status else submission.status,
        "created_at": submission.created_at.isoformat() if submission.created_at else None,
        "updated_at": submission.updated_at.isoformat() if submission.updated_at else None,
    }
