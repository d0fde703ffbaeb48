"""Health endpoint."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    return {
        "status": "ok",
        "active_backend": settings.active_backend.value,
        "failover_enabled": settings.failover_enabled,
    }
