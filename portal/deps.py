from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.errors import AuthError
from portal.core.request_context import set_request_context
from portal.models.admin import Admin
from portal.services.admin_auth import ADMIN_SESSION_COOKIE, decode_admin_session

logger = logging.getLogger(__name__)


def get_current_admin(
    request: Request,
    db: Session = Depends(get_db),
) -> Admin:
    token = request.cookies.get(ADMIN_SESSION_COOKIE)
    if not token:
        raise AuthError("Admin belum login")

    session = decode_admin_session(token)
    if session is None:
        raise AuthError("Sesi tidak valid atau kedaluwarsa")
    admin_id = session.admin_id

    admin = (
        db.query(Admin)
        .filter(Admin.id == admin_id, Admin.is_active.is_(True))
        .first()
    )
    if not admin:
        logger.warning("session for unknown or inactive admin admin_id=%s", admin_id)
        raise AuthError("Admin tidak ditemukan")

    request.state.admin = admin
    set_request_context(admin_id=admin.id)
    return admin
