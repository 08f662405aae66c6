"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, fresh editing services and the FastAPI test client.
"""

import os

os.environ.setdefault("PAGECRAFT_ENVIRONMENT", "testing")

import httpx
import pytest
import pytest_asyncio
from typing import AsyncGenerator, Generator
from fastapi.testclient import TestClient
from pydantic_settings import SettingsConfigDict

# Import application modules
import pagecraft.config.settings as settings_module
from pagecraft.config.settings import Settings
from pagecraft.api.dependencies import EditingServices, build_services, reset_services
from pagecraft.api.main import app
from pagecraft.core.editing.auth import OwnershipAuthorizationChecker
from pagecraft.core.editing.handler import ChildEditService, ModuleEditService, ReviewService
from pagecraft.core.editing.state_machine import EditStateMachine
from pagecraft.core.storage.memory import InMemoryModuleStore, ReviewQueue, seed_modules


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="PAGECRAFT_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(scope="session", autouse=True)
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    previous = settings_module.settings
    settings_module.settings = test_settings
    yield test_settings
    settings_module.settings = previous


@pytest.fixture
def services(test_settings: TestSettings) -> EditingServices:
    """Fresh shared services, seeded with the default modules."""
    return reset_services(test_settings)


@pytest.fixture
def client(services: EditingServices) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to fresh services."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def local_services(test_settings: TestSettings) -> EditingServices:
    """Services not shared with the application, for unit tests."""
    return build_services(test_settings)


@pytest.fixture
def store() -> InMemoryModuleStore:
    return InMemoryModuleStore(seed_modules())


@pytest.fixture
def queue() -> ReviewQueue:
    return ReviewQueue()


@pytest.fixture
def machine() -> EditStateMachine:
    return EditStateMachine()


@pytest.fixture
def module_service(
    store: InMemoryModuleStore, queue: ReviewQueue, machine: EditStateMachine
) -> ModuleEditService:
    return ModuleEditService(store, queue, machine, OwnershipAuthorizationChecker(["admin"]))


@pytest.fixture
def child_service(module_service: ModuleEditService) -> ChildEditService:
    return ChildEditService(module_service)


@pytest.fixture
def review_service(module_service: ModuleEditService, child_service: ChildEditService) -> ReviewService:
    return ReviewService(module_service, child_service)


@pytest_asyncio.fixture
async def async_client(services: EditingServices) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client for concurrent request tests."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
