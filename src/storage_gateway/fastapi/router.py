"""Router factories for the storage service.

Every endpoint is declared once in an explicit routing table
(method + path pattern -> handler) and registered on an APIRouter at
startup. Each route is wrapped with the request middleware chain.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter
from fastapi.routing import APIRoute

from storage_gateway.core.middleware import build_middleware_chain, request_logging
from storage_gateway.fastapi import handlers

logger = logging.getLogger(__name__)

STORAGE_TAG = "Storage api"
MAINT_TAG = "Storage maintenance api"

DEFAULT_MIDDLEWARE: tuple[Callable[..., Any], ...] = (request_logging,)


@dataclass(frozen=True)
class RouteEntry:
    """One row of a routing table."""

    method: str
    path: str
    handler: Callable[..., Any]
    summary: str


STORAGE_ROUTES: tuple[RouteEntry, ...] = (
    RouteEntry("PUT", "/content/{filesystem}/{path:path}", handlers.put_content, "Write a file"),
    RouteEntry("GET", "/content/{filesystem}/{path:path}", handlers.get_content, "Retrieve a file"),
    RouteEntry(
        "DELETE", "/content/{filesystem}/{path:path}", handlers.delete_content, "Delete a file"
    ),
    RouteEntry("GET", "/browse", handlers.browse_filesystems, "List all filesystems"),
    RouteEntry("GET", "/browse/{path:path}", handlers.browse, "List a directory"),
    RouteEntry(
        "GET",
        "/info/{filesystem}/{path:path}",
        handlers.get_file_info,
        "Get the information of the file",
    ),
    RouteEntry(
        "GET",
        "/filesystem/containing/{path:path}",
        handlers.filesystems_containing,
        "Get the filesystems containing the specified path",
    ),
    RouteEntry(
        "POST",
        "/filesystem/cleanup",
        handlers.cleanup,
        "Cleanup the files of the path in specified filesystems",
    ),
    RouteEntry("GET", "/filesystems", handlers.list_filesystems, "Get all filesystems"),
)

MAINT_ROUTES: tuple[RouteEntry, ...] = (
    RouteEntry(
        "GET", "/filesystems/empty", handlers.list_empty_filesystems, "Get empty filesystems"
    ),
    RouteEntry(
        "DELETE", "/filesystems/empty", handlers.purge_empty_filesystems, "Purge empty filesystems"
    ),
)


def create_storage_router(
    *,
    prefix: str = "/api/storage",
    middleware: Sequence[Callable[..., Any]] = DEFAULT_MIDDLEWARE,
) -> APIRouter:
    """Create the router serving file content, browsing and batch operations.

    Args:
        prefix: URL prefix for all storage routes.
        middleware: Request middleware applied to every route (outermost first).

    Example:
        app = FastAPI()
        app.include_router(create_storage_router())
    """
    return _build_router(STORAGE_ROUTES, prefix=prefix, tag=STORAGE_TAG, middleware=middleware)


def create_maint_router(
    *,
    prefix: str = "/api/storage/maint",
    middleware: Sequence[Callable[..., Any]] = DEFAULT_MIDDLEWARE,
) -> APIRouter:
    """Create the router for filesystem maintenance operations."""
    return _build_router(MAINT_ROUTES, prefix=prefix, tag=MAINT_TAG, middleware=middleware)


def _build_router(
    routes: Sequence[RouteEntry],
    *,
    prefix: str,
    tag: str,
    middleware: Sequence[Callable[..., Any]],
) -> APIRouter:
    router = APIRouter(prefix=prefix)
    route_class = _make_middleware_route(middleware) if middleware else None

    for entry in routes:
        _add_route(
            router=router,
            entry=entry,
            tags=[tag],
            route_class=route_class,
        )
        logger.debug(
            "Registered route",
            extra={"method": entry.method, "route": prefix + entry.path},
        )

    logger.info(
        "Route registration complete",
        extra={"route_count": len(routes), "prefix": prefix or "(none)"},
    )
    return router


def _add_route(
    router: APIRouter,
    entry: RouteEntry,
    tags: list[str],
    route_class: type[APIRoute] | None = None,
) -> None:
    """Add one routing table entry to the router with its OpenAPI metadata.

    Args:
        router: The APIRouter to add the route to.
        entry: The routing table entry.
        tags: List of OpenAPI tags.
        route_class: Optional custom APIRoute subclass for middleware wrapping.
    """
    kwargs: dict[str, Any] = {
        "tags": tags,
        "summary": entry.summary,
        "description": entry.handler.__doc__,
    }
    if route_class is not None:
        kwargs["route_class_override"] = route_class

    router.add_api_route(
        path=entry.path,
        endpoint=entry.handler,
        methods=[entry.method],
        **kwargs,
    )


def _make_middleware_route(
    middleware_stack: Sequence[Callable[..., Any]],
) -> type[APIRoute]:
    """Create an APIRoute subclass that wraps handlers with middleware.

    The wrapping happens in get_route_handler(), after FastAPI has resolved
    dependency injection, so middleware receives (request, call_next).
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute
