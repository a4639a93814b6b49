"""FastAPI adapter for the storage gateway."""

from storage_gateway.fastapi.app import create_app
from storage_gateway.fastapi.router import create_maint_router, create_storage_router

__all__ = ["create_app", "create_maint_router", "create_storage_router"]
