#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from portal.core.database import SessionLocal, engine  # noqa: E402
from portal.services.admin_bootstrap import ensure_admins_table, upsert_admin  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Buat atau perbarui akun admin.")
    parser.add_argument("--username", required=True, help="Username admin (3-50 karakter)")
    parser.add_argument("--email", help="Email admin, juga dapat dipakai untuk login")
    parser.add_argument("--password", help="Password admin (wajib untuk admin baru)")
    parser.add_argument("--role", default="ADMIN", choices=["ADMIN", "SUPER_ADMIN"], help="Role admin")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        ensure_admins_table(engine)
    except RuntimeError as exc:
        print(str(exc))
        return 1

    db = SessionLocal()
    try:
        admin, created = upsert_admin(
            db,
            username=args.username,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except ValueError as exc:
        print(str(exc))
        return 1
    finally:
        db.close()

    action = "dibuat" if created else "diperbarui"
    print(f"Admin {action}: username={admin.username} email={admin.email or '-'} role={admin.role}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
