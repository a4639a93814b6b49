"""Shared pytest fixtures for storage-gateway tests."""

import io
import threading
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from storage_gateway.config import GatewaySettings
from storage_gateway.engine import MemoryStorageEngine
from storage_gateway.fastapi.app import create_app
from storage_gateway.gateway import StorageGateway


class ScriptedEngine(MemoryStorageEngine):
    """MemoryStorageEngine that raises scripted errors per filesystem.

    ``errors`` maps a filesystem name to the exception raised by every
    per-file call against it. ``calls`` records (operation, filesystem, path)
    for each call, and ``max_in_flight`` the highest number of concurrent
    exists/delete calls observed.
    """

    def __init__(self, errors: dict[str, Exception] | None = None, delay: float = 0.0) -> None:
        super().__init__()
        self.errors = dict(errors or {})
        self.delay = delay
        self.calls: list[tuple[str, str, str]] = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._counter_lock = threading.Lock()

    def _enter(self, operation: str, filesystem: str, path: str) -> None:
        with self._counter_lock:
            self.calls.append((operation, filesystem, path))
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        if self.delay:
            threading.Event().wait(self.delay)
        if filesystem in self.errors:
            with self._counter_lock:
                self._in_flight -= 1
            raise self.errors[filesystem]

    def _exit(self) -> None:
        with self._counter_lock:
            self._in_flight -= 1

    def exists(self, filesystem: str, path: str) -> bool:
        self._enter("exists", filesystem, path)
        try:
            return super().exists(filesystem, path)
        finally:
            self._exit()

    def delete(self, filesystem: str, path: str) -> bool:
        self._enter("delete", filesystem, path)
        try:
            return super().delete(filesystem, path)
        finally:
            self._exit()

    def open_input_stream(self, filesystem: str, path: str) -> Any:
        if filesystem in self.errors:
            raise self.errors[filesystem]
        return super().open_input_stream(filesystem, path)

    def list(self, filesystem: str, path: str, *args: Any, **kwargs: Any) -> Any:
        if filesystem in self.errors:
            raise self.errors[filesystem]
        return super().list(filesystem, path, *args, **kwargs)

    def get_file_info(self, filesystem: str, path: str) -> Any:
        if filesystem in self.errors:
            raise self.errors[filesystem]
        return super().get_file_info(filesystem, path)


@pytest.fixture
def settings() -> GatewaySettings:
    """Settings isolated from the environment and any .env file."""
    return GatewaySettings(_env_file=None, max_workers=4, stream_chunk_size=1024)


@pytest.fixture
def engine() -> MemoryStorageEngine:
    return MemoryStorageEngine()


@pytest.fixture
def put_file():
    """Store bytes in an engine.

    Returns a callable (engine, filesystem, path, data=b"content").
    """

    def _put(engine: MemoryStorageEngine, filesystem: str, path: str, data: bytes = b"content"):
        engine.write_file(filesystem, path, io.BytesIO(data))
        return engine

    return _put


@pytest.fixture
def scripted_engine():
    """Create a ScriptedEngine with the given per-filesystem errors."""

    def _create(errors: dict[str, Exception] | None = None, delay: float = 0.0) -> ScriptedEngine:
        return ScriptedEngine(errors=errors, delay=delay)

    return _create


@pytest.fixture
def gateway(engine: MemoryStorageEngine) -> StorageGateway:
    return StorageGateway(engine, max_workers=4)


@pytest.fixture
def app(engine: MemoryStorageEngine, settings: GatewaySettings) -> FastAPI:
    return create_app(engine=engine, settings=settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
