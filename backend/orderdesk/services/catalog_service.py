"""Catalog Service — pass-through listings for customers and products."""

from orderdesk.core.repository_protocols import ProcedureExecutor, RowSet

PROC_CUSTOMER_GET_ALL = "dbo.uspCustomer_GetAll"
PROC_PRODUCT_GET_ALL = "dbo.uspProduct_GetAll"


class CatalogService:
    def __init__(self, executor: ProcedureExecutor):
        self.executor = executor

    async def list_customers(self) -> RowSet:
        rowsets = await self.executor.execute(PROC_CUSTOMER_GET_ALL)
        return rowsets[0] if rowsets else []

    async def list_products(self) -> RowSet:
        rowsets = await self.executor.execute(PROC_PRODUCT_GET_ALL)
        return rowsets[0] if rowsets else []
