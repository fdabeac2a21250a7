from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from peerdraft.main import create_app
from peerdraft.storage import MemoryDataStore


def build_client(config, data_store, handler) -> TestClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TestClient(create_app(config=config, data_store=data_store, http_client=http_client))


def no_plan(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={})


def test_startup_migrates_before_serving(config):
    data_store = MemoryDataStore({"name": "Ada", "connectAPI": "https://stale.example/connect"})
    with build_client(config, data_store, no_plan) as client:
        health = client.get("/api/v1/health")
        assert health.status_code == 200
        assert health.json()["migrated"] is True

        body = client.get("/api/v1/settings").json()
        assert body["name"] == "Ada"
        assert body["connectAPI"] == config.connect_api
        assert body["plan"]["type"] == "hobby"
        assert body["oid"]


def test_update_name(config):
    data_store = MemoryDataStore()
    with build_client(config, data_store, no_plan) as client:
        response = client.put("/api/v1/settings/name", json={"name": "Ada"})
        assert response.status_code == 200
        assert response.json()["name"] == "Ada"
        assert client.get("/api/v1/settings").json()["name"] == "Ada"


def test_hobby_subscription_view_links_checkout(config):
    data_store = MemoryDataStore({"oid": "abc", "duration": 12})
    with build_client(config, data_store, no_plan) as client:
        view = client.get("/api/v1/subscription").json()
    assert view["plan_type"] == "hobby"
    assert view["minutes_used"] == 12
    assert isinstance(view["minutes_used"], int)
    assert view["checkout_url"] == "https://peerdraft.app/checkout?oid=abc"
    assert view["support_email"] == config.support_email


def test_connect_then_view_shows_professional(config):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"plan": {"type": "professional", "email": "ada@x.com"}})

    data_store = MemoryDataStore({"oid": "abc"})
    with build_client(config, data_store, handler) as client:
        response = client.post("/api/v1/subscription/connect", json={"email": "ada@x.com"})
        assert response.status_code == 200
        assert response.json() == {
            "updated": True,
            "plan": {"type": "professional", "email": "ada@x.com"},
        }
        view = client.get("/api/v1/subscription").json()

    assert seen == [{"email": "ada@x.com", "oid": "abc"}]
    assert view["plan_type"] == "professional"
    assert view["checkout_url"] is None


def test_refresh_without_plan_reports_not_updated(config):
    with build_client(config, MemoryDataStore(), no_plan) as client:
        response = client.post("/api/v1/subscription/refresh")
    assert response.status_code == 200
    assert response.json()["updated"] is False
    assert response.json()["plan"]["type"] == "hobby"


def test_remote_failure_maps_to_bad_gateway(config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    data_store = MemoryDataStore({"oid": "abc", "plan": {"type": "professional"}})
    with build_client(config, data_store, handler) as client:
        response = client.post("/api/v1/subscription/connect", json={"email": "ada@x.com"})
        assert response.status_code == 502
        assert client.get("/api/v1/settings").json()["plan"] == {"type": "professional"}


def test_refresh_with_falsy_plan_is_not_an_error(config):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"plan": False})

    with build_client(config, MemoryDataStore({"oid": "abc"}), handler) as client:
        response = client.post("/api/v1/subscription/refresh")
    assert response.status_code == 200
    assert response.json()["updated"] is False
