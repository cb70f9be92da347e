"""Test fixtures for API tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.v1 import api_router
from app.api.v1.dependencies import clear_caches, get_order_repository
from app.api.v1.error_handlers import register_error_handlers
from app.api.v1.routers.health import router as health_router
from app.persistence.repositories import InMemoryOrderRecordRepository


@pytest.fixture
def repository() -> InMemoryOrderRecordRepository:
    """Fresh in-memory repository."""
    return InMemoryOrderRecordRepository()


@pytest.fixture
def app(repository: InMemoryOrderRecordRepository) -> FastAPI:
    """Create test FastAPI application."""
    clear_caches()
    
    test_app = FastAPI(title="Test API")
    register_error_handlers(test_app)
    test_app.include_router(health_router)
    test_app.include_router(api_router)
    
    # Override dependencies
    test_app.dependency_overrides[get_order_repository] = lambda: repository
    
    yield test_app
    
    # Cleanup
    test_app.dependency_overrides.clear()
    clear_caches()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)
