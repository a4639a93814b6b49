"""Application factory and process entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storage_gateway.config import GatewaySettings, configure_logging, get_settings
from storage_gateway.engine import MemoryStorageEngine, StorageEngine
from storage_gateway.exceptions import (
    BadInputError,
    ContainmentError,
    EngineError,
    NotFoundError,
    StorageGatewayError,
)
from storage_gateway.fastapi.responses import error_response
from storage_gateway.fastapi.router import create_maint_router, create_storage_router
from storage_gateway.gateway import StorageGateway

logger = logging.getLogger(__name__)


def create_app(
    engine: StorageEngine | None = None,
    settings: GatewaySettings | None = None,
) -> FastAPI:
    """Build the storage service application.

    Args:
        engine: Storage engine to serve. Defaults to a fresh MemoryStorageEngine.
        settings: Settings to use. Defaults to the environment-derived settings.

    Returns:
        A FastAPI app with the storage and maintenance routers mounted.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    if engine is None:
        engine = MemoryStorageEngine()

    app = FastAPI(
        title="Storage Gateway",
        description="HTTP front door to a path-mapped, filesystem-scoped content store",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.gateway = StorageGateway(
        engine,
        max_workers=settings.max_workers,
        default_write_timeout=settings.default_write_timeout,
    )

    app.include_router(create_storage_router(prefix=settings.api_prefix))
    app.include_router(create_maint_router(prefix=f"{settings.api_prefix}/maint"))
    register_exception_handlers(app)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    logger.info(
        "Storage gateway created",
        extra={"engine": type(engine).__name__, "api_prefix": settings.api_prefix},
    )
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Convert gateway exceptions into JSON error responses."""

    @app.exception_handler(BadInputError)
    async def _bad_input(request: Request, exc: BadInputError) -> JSONResponse:
        return error_response(400, str(exc))

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return error_response(404, str(exc))

    @app.exception_handler(ContainmentError)
    async def _containment(request: Request, exc: ContainmentError) -> JSONResponse:
        return error_response(500, str(exc), failures=exc.failures)

    @app.exception_handler(EngineError)
    async def _engine(request: Request, exc: EngineError) -> JSONResponse:
        return error_response(500, str(exc))

    @app.exception_handler(StorageGatewayError)
    async def _gateway(request: Request, exc: StorageGatewayError) -> JSONResponse:
        return error_response(500, str(exc))


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
