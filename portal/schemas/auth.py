from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @property
    def login_id(self) -> str:
        return (self.username or self.email or "").strip()

