from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class SubmissionCreate(BaseModel):
    """Raw citizen input. Field rules live in ``submission_validator`` so that
    all failing fields are reported together."""

    model_config = ConfigDict(extra="ignore")

    nama: Optional[str] = None
    nik: Optional[str] = None
    email: Optional[str] = None
    no_wa: Optional[str] = None
    jenis_layanan: Optional[str] = None
    consent: Any = None

    @field_validator("nama", "nik", "email", "no_wa", "jenis_layanan", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if value is None or isinstance(value, str):
            return value
        return None


class StatusUpdate(BaseModel):
    status: str
