"""API test fixtures — FastAPI test client over a scripted procedure executor.

Invariants:
    - get_executor dependency overridden with FakeExecutor for every test
    - No real database engine is created (lifespan is not run by ASGITransport)
    - auth_headers carries the configured API key

Design Decisions:
    - Fake at the ProcedureExecutor boundary: routes, services and the pure
      core run for real, only the stored procedures are scripted
"""

import pytest
from httpx import ASGITransport, AsyncClient

from orderdesk.config import get_settings
from orderdesk.infrastructure.database import get_executor
from orderdesk.main import app
from tests.api.fake_executor import FakeExecutor


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def auth_headers():
    return {"x-api-key": get_settings().api_key}


@pytest.fixture
async def client(executor):
    """FastAPI test client with the executor dependency overridden."""
    app.dependency_overrides[get_executor] = lambda: executor

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
