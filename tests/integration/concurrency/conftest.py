"""Shared fixtures for concurrency integration tests.

Builds the full application around a slow ScriptedEngine so that many
requests overlap inside the gateway at once.
"""

import pytest
from fastapi import FastAPI

from storage_gateway.config import GatewaySettings
from storage_gateway.fastapi.app import create_app

MAX_WORKERS = 3


@pytest.fixture
def slow_engine(scripted_engine):
    """Engine with 5ms per exists/delete call; "broken" always fails."""
    return scripted_engine({"broken": OSError("broken filesystem")}, delay=0.005)


@pytest.fixture
def app(slow_engine) -> FastAPI:
    settings = GatewaySettings(_env_file=None, max_workers=MAX_WORKERS)
    return create_app(engine=slow_engine, settings=settings)
