"""API Dependencies — API-key guard and service factories for route injection.

Invariants:
    - Guarded routers declare require_api_key at router level, never per route
    - The key is compared in constant time
    - No configured key means every guarded request is rejected
"""

import secrets

from fastapi import Depends, Header

from orderdesk.config import get_settings
from orderdesk.core.errors import UnauthorizedError
from orderdesk.infrastructure.database import get_executor
from orderdesk.core.repository_protocols import ProcedureExecutor
from orderdesk.services.catalog_service import CatalogService
from orderdesk.services.order_service import OrderService


async def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
) -> None:
    expected = get_settings().api_key
    if not x_api_key or not expected:
        raise UnauthorizedError()
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise UnauthorizedError()


def get_order_service(
    executor: ProcedureExecutor = Depends(get_executor),
) -> OrderService:
    return OrderService(executor)


def get_catalog_service(
    executor: ProcedureExecutor = Depends(get_executor),
) -> CatalogService:
    return CatalogService(executor)
