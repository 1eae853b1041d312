from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from portal.core.database import get_db
from portal.core.errors import AuthError, InternalError, PortalError
from portal.deps import get_current_admin
from portal.models._common import utcnow
from portal.models.admin import Admin
from portal.schemas.auth import LoginPayload
from portal.services.admin_auth import (
    clear_admin_session_cookie,
    create_admin_session,
    set_admin_session_cookie,
)
from portal.services.admin_bootstrap import find_admin_by_login
from portal.services.passwords import hash_password, needs_rehash, verify_password

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Username atau password salah"


def admin_to_dict(admin: Admin) -> dict:
    return {
        "id": admin.id,
        "username": admin.username,
        "email": admin.email,
        "role": admin.role,
    }


def _missing_fields_response(payload: LoginPayload) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Username dan password wajib diisi",
            "errors": {
                "username": None if payload.login_id else "Username wajib diisi",
                "password": None if payload.password else "Password wajib diisi",
            },
        },
    )


def _authenticate(db: Session, payload: LoginPayload) -> Admin:
    admin = find_admin_by_login(db, payload.login_id)
    if admin is None or not admin.is_active or not verify_password(payload.password, admin.password_hash):
        logger.warning("admin login failed login_id=%s", payload.login_id)
        raise AuthError(INVALID_CREDENTIALS, errors={"general": INVALID_CREDENTIALS})
    return admin


@router.post("/login")
@router.post("/admin/login")
def admin_login(payload: LoginPayload, response: Response, db: Session = Depends(get_db)):
    if not payload.login_id or not payload.password:
        return _missing_fields_response(payload)

    try:
        admin = _authenticate(db, payload)
        if needs_rehash(admin.password_hash):
            admin.password_hash = hash_password(payload.password)
        admin.last_login = utcnow()
        db.commit()
        db.refresh(admin)
        token = create_admin_session(admin.id, admin.role)
    except PortalError:
        raise
    except Exception as exc:
        db.rollback()
        raise InternalError(
            "Terjadi kesalahan internal server. Silakan coba lagi.",
            errors={"general": "Terjadi kesalahan sistem. Silakan hubungi administrator."},
        ) from exc

    set_admin_session_cookie(response, token)
    logger.info("admin login success admin_id=%s", admin.id)
    return {
        "success": True,
        "message": "Login berhasil",
        "data": {"admin": admin_to_dict(admin)},
    }


@router.post("/admin/logout")
def admin_logout(response: Response):
    clear_admin_session_cookie(response)
    return {"success": True}


@router.get("/admin/me")
def admin_me(admin: Admin = Depends(get_current_admin)):
    return {"success": True, "data": {"admin": admin_to_dict(admin)}}
