from fastapi import APIRouter, Depends, Request

from searchpulse.core.config import Settings
from searchpulse.core.dependencies import get_app_settings
from searchpulse.core.enums import MetricsBackend

router = APIRouter(tags=["health"])

@router.get("/health")
def health(request: Request, settings: Settings = Depends(get_app_settings)):
    metrics_enabled = (
        settings.METRICS_BACKEND == MetricsBackend.SQL.value
        or getattr(request.app.state, "supabase", None) is not None
    )
    return {"status": "ok", "metrics_enabled": metrics_enabled}
