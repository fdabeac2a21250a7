"""
Health API Routes
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from peerdraft.api.dependencies import get_store
from peerdraft.services.settings_store import SettingsStore

router = APIRouter()


@router.get("/health")
async def health_check(store: SettingsStore = Depends(get_store)) -> JSONResponse:
    """Service liveness and whether the startup migration completed."""
    ok = store.migrated
    return JSONResponse(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if ok else "starting",
            "migrated": ok,
        },
    )
