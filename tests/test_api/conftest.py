"""FastAPI test client fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from domainfront.api.app import include_routes, init_state
from domainfront.api.middleware import CorrelationIdMiddleware, add_exception_handlers

if TYPE_CHECKING:
    from domainfront.config import Settings


def _create_test_app(settings: Settings) -> FastAPI:
    """Create a FastAPI app wired from test settings (no lifespan)."""
    app = FastAPI(title="Domainfront Test")
    init_state(app, settings)

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)
    include_routes(app)
    return app


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return _create_test_app(settings)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
