from __future__ import annotations

from fastapi import APIRouter, Depends

from portal.core.metrics import request_metrics
from portal.deps import get_current_admin
from portal.models.admin import Admin

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("")
def metrics(_admin: Admin = Depends(get_current_admin)):
    return {"endpoints": request_metrics.snapshot()}
