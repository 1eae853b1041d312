from __future__ import annotations

import logging

from sqlalchemy import func, inspect, or_
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from portal.models.admin import ADMIN_ROLES, Admin
from portal.services.passwords import hash_password, looks_hashed

logger = logging.getLogger(__name__)
BOOTSTRAP_PREFIX = "[ADMIN_BOOTSTRAP]"


def ensure_admins_table(engine: Engine) -> None:
    inspector = inspect(engine)
    if not inspector.has_table("admins"):
        raise RuntimeError("Tabel admins tidak ditemukan. Jalankan migrasi terlebih dahulu.")


def find_admin_by_login(db: Session, login_id: str) -> Admin | None:
    normalized = (login_id or "").strip().lower()
    if not normalized:
        return None
    return (
        db.query(Admin)
        .filter(
            or_(
                func.lower(Admin.username) == normalized,
                func.lower(Admin.email) == normalized,
            )
        )
        .first()
    )


def _resolve_password_hash(password: str) -> str:
    if looks_hashed(password):
        logger.info("%s password already hashed; storing as-is", BOOTSTRAP_PREFIX)
        return password
    return hash_password(password)


def upsert_admin(
    db: Session,
    *,
    username: str,
    email: str | None,
    password: str | None,
    role: str = "ADMIN",
) -> tuple[Admin, bool]:
    role = (role or "ADMIN").strip().upper()
    if role not in ADMIN_ROLES:
        raise ValueError(f"Role tidak valid: {role}")

    username = username.strip()
    if not 3 <= len(username) <= 50:
        raise ValueError("Username harus 3 sampai 50 karakter.")
    if password is not None and not looks_hashed(password) and len(password) < 6:
        raise ValueError("Password minimal 6 karakter.")

    existing = find_admin_by_login(db, username)
    if existing:
        existing.email = email or existing.email
        existing.role = role
        existing.is_active = True
        if password:
            existing.password_hash = _resolve_password_hash(password)
        db.commit()
        db.refresh(existing)
        return existing, False

    if not password:
        raise ValueError("Password wajib diisi untuk admin baru.")

    admin = Admin(
        username=username,
        email=email,
        password_hash=_resolve_password_hash(password),
        role=role,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin, True


def bootstrap_initial_admin(
    db: Session,
    *,
    username: str,
    email: str | None,
    password: str,
    role: str,
) -> Admin | None:
    """Create the first admin only when no admin with that login exists."""
    if not password:
        logger.warning("%s skipped: configure DEV_ADMIN_PASSWORD.", BOOTSTRAP_PREFIX)
        return None

    existing = find_admin_by_login(db, username) or (find_admin_by_login(db, email) if email else None)
    if existing:
        logger.info("%s exists id=%s username=%s", BOOTSTRAP_PREFIX, existing.id, existing.username)
        return existing

    admin, _ = upsert_admin(db, username=username, email=email, password=password, role=role)
    logger.info("%s created id=%s username=%s", BOOTSTRAP_PREFIX, admin.id, admin.username)
    return admin
