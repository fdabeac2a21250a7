"""Keep the local plan in step with the remote subscription service."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from peerdraft.core.exceptions import SubscriptionError
from peerdraft.core.logger import get_logger
from peerdraft.models.reconcile import ReconcileResult
from peerdraft.schemas.settings import PluginSettings, parse_plan
from peerdraft.services.settings_store import SettingsStore

logger = get_logger(__name__)

CONNECT = "connect"
REFRESH = "refresh"


class SubscriptionClient:
    """JSON-over-HTTP client for the subscription service."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def post_json(self, operation: str, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON object.

        A JSON body that is not an object is returned as ``{}``; the caller
        treats it like any other response without a plan.
        """
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise SubscriptionError(operation, f"HTTP {exc.response.status_code} from {url}") from exc
        except httpx.HTTPError as exc:
            raise SubscriptionError(operation, f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise SubscriptionError(operation, f"response from {url} is not JSON") from exc
        if not isinstance(data, dict):
            return {}
        return data

    async def close(self):
        if self._owns_client:
            await self.client.aclose()


class SubscriptionReconciler:
    """Connect and refresh flows: one remote call, then adopt the reported plan."""

    def __init__(self, store: SettingsStore, client: SubscriptionClient):
        self.store = store
        self.client = client
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, oid: str) -> asyncio.Lock:
        lock = self._locks.get(oid)
        if lock is None:
            lock = self._locks[oid] = asyncio.Lock()
        return lock

    async def connect(self, email: str) -> ReconcileResult:
        """Bind an existing subscription, identified by ``email``, to this installation."""
        return await self._reconcile(
            CONNECT,
            lambda current: (current.connect_api, {"email": email, "oid": current.oid}),
        )

    async def refresh(self) -> ReconcileResult:
        """Pull the latest plan for this installation's oid. Safe to repeat."""
        return await self._reconcile(
            REFRESH,
            lambda current: (current.subscription_api, {"oid": current.oid}),
        )

    async def _reconcile(
        self,
        operation: str,
        build_request: Callable[[PluginSettings], Tuple[str, Dict[str, Any]]],
    ) -> ReconcileResult:
        current = await self.store.get()
        async with self._lock_for(current.oid):
            current = await self.store.get()
            url, payload = build_request(current)
            logger.info("%s: requesting plan for oid=%s", operation, current.oid)
            try:
                data = await self.client.post_json(operation, url, payload)
            except SubscriptionError as exc:
                logger.warning("%s: %s", operation, exc)
                raise
            return await self._apply(operation, data)

    async def _apply(self, operation: str, data: Dict[str, Any]) -> ReconcileResult:
        payload = data.get("plan")
        if payload is None or (not payload and not isinstance(payload, dict)):
            current = await self.store.get()
            logger.info("%s: no plan in response, keeping %s", operation, current.plan.type)
            return ReconcileResult(operation=operation, updated=False, plan=current.plan)

        try:
            plan = parse_plan(payload)
        except PydanticValidationError as exc:
            logger.warning("%s: rejected malformed plan %r", operation, payload)
            raise SubscriptionError(operation, "response carried an unknown plan shape") from exc

        previous = (await self.store.get()).plan.type
        updated = await self.store.adopt_plan(plan)
        logger.info("%s: plan %s -> %s", operation, previous, updated.plan.type)
        return ReconcileResult(operation=operation, updated=True, plan=updated.plan)
