"""
Settings API Routes
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from peerdraft.api.dependencies import get_store
from peerdraft.core.exceptions import StorageError, ValidationError
from peerdraft.schemas.settings import NameUpdate
from peerdraft.services.settings_store import SettingsStore

router = APIRouter()


@router.get("")
async def read_settings(store: SettingsStore = Depends(get_store)) -> dict[str, Any]:
    current = await store.get()
    return current.to_record()


@router.put("/name")
async def update_name(body: NameUpdate, store: SettingsStore = Depends(get_store)) -> dict[str, Any]:
    """Display name shown to collaborators."""
    try:
        updated = await store.set_name(body.name)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return updated.to_record()
