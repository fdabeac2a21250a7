"""
Subscription API Routes
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from peerdraft.api.dependencies import get_reconciler, get_store
from peerdraft.core.exceptions import StorageError, SubscriptionError
from peerdraft.models.reconcile import ReconcileResult
from peerdraft.schemas.settings import ConnectRequest, ReconcileResponse, SubscriptionView
from peerdraft.services.settings_store import SettingsStore
from peerdraft.services.subscription import SubscriptionReconciler
from peerdraft.services.subscription_view import build_subscription_view

router = APIRouter()


def _response(result: ReconcileResult) -> ReconcileResponse:
    return ReconcileResponse(updated=result.updated, plan=result.plan_record())


@router.get("", response_model=SubscriptionView)
async def read_subscription(request: Request, store: SettingsStore = Depends(get_store)) -> SubscriptionView:
    current = await store.get()
    return build_subscription_view(current, request.app.state.config)


@router.post("/connect", response_model=ReconcileResponse)
async def connect_subscription(
    body: ConnectRequest,
    reconciler: SubscriptionReconciler = Depends(get_reconciler),
) -> ReconcileResponse:
    """Use an existing subscription bought with ``email``."""
    try:
        result = await reconciler.connect(body.email)
    except SubscriptionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return _response(result)


@router.post("/refresh", response_model=ReconcileResponse)
async def refresh_subscription(
    reconciler: SubscriptionReconciler = Depends(get_reconciler),
) -> ReconcileResponse:
    """Re-read subscription data after subscribing or connecting a license."""
    try:
        result = await reconciler.refresh()
    except SubscriptionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return _response(result)
