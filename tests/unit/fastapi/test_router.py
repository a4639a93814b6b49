"""Tests for the FastAPI router factories."""

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from storage_gateway.core.middleware import REQUEST_ID_HEADER
from storage_gateway.fastapi.router import (
    MAINT_ROUTES,
    MAINT_TAG,
    STORAGE_ROUTES,
    STORAGE_TAG,
    create_maint_router,
    create_storage_router,
)
from storage_gateway.gateway import StorageGateway


def _routes(router) -> dict[tuple[str, str], APIRoute]:
    return {
        (method, route.path): route
        for route in router.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }


class TestRoutingTable:
    def test_storage_routes(self):
        assert {(e.method, e.path) for e in STORAGE_ROUTES} == {
            ("PUT", "/content/{filesystem}/{path:path}"),
            ("GET", "/content/{filesystem}/{path:path}"),
            ("DELETE", "/content/{filesystem}/{path:path}"),
            ("GET", "/browse"),
            ("GET", "/browse/{path:path}"),
            ("GET", "/info/{filesystem}/{path:path}"),
            ("GET", "/filesystem/containing/{path:path}"),
            ("POST", "/filesystem/cleanup"),
            ("GET", "/filesystems"),
        }

    def test_maint_routes(self):
        assert {(e.method, e.path) for e in MAINT_ROUTES} == {
            ("GET", "/filesystems/empty"),
            ("DELETE", "/filesystems/empty"),
        }


class TestCreateStorageRouter:
    def test_registers_every_entry_under_prefix(self):
        routes = _routes(create_storage_router(prefix="/api/storage"))

        assert len(routes) == len(STORAGE_ROUTES)
        assert ("GET", "/api/storage/browse") in routes
        assert ("GET", "/api/storage/browse/{path:path}") in routes
        assert ("POST", "/api/storage/filesystem/cleanup") in routes

    def test_tags_and_summary(self):
        routes = _routes(create_storage_router())
        route = routes[("GET", "/api/storage/filesystems")]

        assert route.tags == [STORAGE_TAG]
        assert route.summary == "Get all filesystems"
        assert route.description == "Get all filesystems."

    def test_custom_prefix(self):
        routes = _routes(create_storage_router(prefix="/v2"))
        assert ("GET", "/v2/filesystems") in routes

    def test_maint_router_tag(self):
        routes = _routes(create_maint_router())
        assert routes[("DELETE", "/api/storage/maint/filesystems/empty")].tags == [MAINT_TAG]


class TestMiddlewareWiring:
    @pytest.fixture
    def make_client(self, engine):
        def _make(middleware) -> TestClient:
            app = FastAPI()
            app.state.gateway = StorageGateway(engine)
            app.include_router(create_storage_router(middleware=middleware))
            return TestClient(app)

        return _make

    def test_default_middleware_stamps_request_id(self, engine):
        app = FastAPI()
        app.state.gateway = StorageGateway(engine)
        app.include_router(create_storage_router())

        response = TestClient(app).delete("/api/storage/content/fs/a.txt")

        assert response.status_code == 200
        assert REQUEST_ID_HEADER in response.headers

    def test_custom_middleware_runs(self, make_client):
        seen: list[str] = []

        async def trace(request: Any, call_next: Any) -> Any:
            seen.append(request.url.path)
            response = await call_next(request)
            response.headers["X-Trace"] = "yes"
            return response

        response = make_client([trace]).delete("/api/storage/content/fs/a.txt")

        assert response.headers["X-Trace"] == "yes"
        assert seen == ["/api/storage/content/fs/a.txt"]
        assert REQUEST_ID_HEADER not in response.headers

    def test_no_middleware(self, make_client):
        response = make_client(()).delete("/api/storage/content/fs/a.txt")
        assert response.status_code == 200
        assert REQUEST_ID_HEADER not in response.headers
