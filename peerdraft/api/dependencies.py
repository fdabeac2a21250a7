"""Shared API dependencies resolved from application state."""
from fastapi import Request

from peerdraft.services.settings_store import SettingsStore
from peerdraft.services.subscription import SubscriptionReconciler


def get_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


def get_reconciler(request: Request) -> SubscriptionReconciler:
    return request.app.state.reconciler


__all__ = ["get_store", "get_reconciler"]
