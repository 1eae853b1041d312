from __future__ import annotations

import re
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email

NIK_PATTERN = re.compile(r"[0-9]{16}")
_NON_DIGIT = re.compile(r"[^0-9]")

MESSAGES = {
    "nama_required": "Nama lengkap wajib diisi",
    "nik_required": "NIK wajib diisi",
    "nik_format": "NIK harus 16 digit angka",
    "email_required": "Email wajib diisi",
    "email_format": "Format email tidak valid",
    "no_wa_required": "Nomor WhatsApp wajib diisi",
    "no_wa_format": "Nomor WhatsApp harus angka",
    "jenis_layanan_required": "Jenis layanan wajib dipilih",
    "consent_required": "Anda harus menyetujui pemberian notifikasi",
}


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def _is_blank(value: Any) -> bool:
    return not _text(value).strip()


def _is_valid_email(value: str) -> bool:
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_submission(payload: Mapping[str, Any]) -> dict[str, str]:
    """Return ``{field: message}`` for every failing field; empty means valid.

    Every rule runs, so a single call reports all problems at once.
    """
    errors: dict[str, str] = {}

    if _is_blank(payload.get("nama")):
        errors["nama"] = MESSAGES["nama_required"]

    nik = payload.get("nik")
    if _is_blank(nik):
        errors["nik"] = MESSAGES["nik_required"]
    elif not NIK_PATTERN.fullmatch(_text(nik)):
        errors["nik"] = MESSAGES["nik_format"]

    email = payload.get("email")
    if _is_blank(email):
        errors["email"] = MESSAGES["email_required"]
    elif not _is_valid_email(_text(email)):
        errors["email"] = MESSAGES["email_format"]

    no_wa = payload.get("no_wa")
    if _is_blank(no_wa):
        errors["no_wa"] = MESSAGES["no_wa_required"]
    elif not _NON_DIGIT.sub("", _text(no_wa)):
        errors["no_wa"] = MESSAGES["no_wa_format"]

    if _is_blank(payload.get("jenis_layanan")):
        errors["jenis_layanan"] = MESSAGES["jenis_layanan_required"]

    if not payload.get("consent"):
        errors["consent"] = MESSAGES["consent_required"]

    return errors


def is_valid_submission(payload: Mapping[str, Any]) -> bool:
    return not validate_submission(payload)
