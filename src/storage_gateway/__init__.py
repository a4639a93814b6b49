"""HTTP gateway for a path-mapped, filesystem-scoped content store."""

# Primary API
from storage_gateway.fastapi.app import create_app
from storage_gateway.gateway import StorageGateway

# Engine contract
from storage_gateway.engine import MemoryStorageEngine, StorageEngine

# Core types
from storage_gateway.core.outcomes import Outcome, OutcomeKind, RejectionCause
from storage_gateway.core.parser import ROOT_DIR, ParsedRoute, RouteKind, parse_route
from storage_gateway.models import BatchCleanupRequest, BatchCleanupResult, FileInfo

# Exceptions
from storage_gateway.exceptions import (
    BadInputError,
    ContainmentError,
    EngineError,
    NotFoundError,
    StorageGatewayError,
)

__all__ = [
    # Primary API
    "create_app",
    "StorageGateway",
    # Engine contract
    "MemoryStorageEngine",
    "StorageEngine",
    # Core types
    "BatchCleanupRequest",
    "BatchCleanupResult",
    "FileInfo",
    "Outcome",
    "OutcomeKind",
    "ParsedRoute",
    "RejectionCause",
    "ROOT_DIR",
    "RouteKind",
    "parse_route",
    # Exceptions
    "BadInputError",
    "ContainmentError",
    "EngineError",
    "NotFoundError",
    "StorageGatewayError",
]

__version__ = "1.0.0"
