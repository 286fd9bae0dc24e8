"""Stored-Procedure Gateway — async engine that runs procedures and returns every result set.

Invariants:
    - Every call runs inside engine.begin(): committed on success, rolled back on error
    - Connection pool uses pool_pre_ping for stale connection detection
    - Driver failures leave this module only as ReferenceNotFoundError or DatabaseError
    - classify_data_error is the only code that inspects driver error state

Design Decisions:
    - Singleton gateway initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - Raw DBAPI cursor inside run_sync: SQLAlchemy Result exposes only the first
      result set, the detail procedure returns three
"""

import logging
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from orderdesk.core.domain_types import DataErrorCategory, ParamType
from orderdesk.core.errors import DatabaseError, ErrorContext, ReferenceNotFoundError
from orderdesk.core.repository_protocols import ProcedureParam, RowSet

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")
_NATIVE_ERROR_CODE = re.compile(r"\((\d+)\) \(SQL\w+\)")

# SQL Server: "statement conflicted with the FOREIGN KEY constraint"
_FOREIGN_KEY_VIOLATION = 547


def classify_data_error(exc: DBAPIError) -> DataErrorCategory:
    """Sort a driver failure into a structured category."""
    orig = getattr(exc, "orig", None) or exc
    message = str(orig)
    match = _NATIVE_ERROR_CODE.search(message)
    if match and int(match.group(1)) == _FOREIGN_KEY_VIOLATION:
        return DataErrorCategory.REFERENCE_MISSING
    # TODO: have uspOrder_Create THROW a dedicated error number for unknown
    # customer/product ids and match on that instead of the message text.
    if "does not exist" in message.lower():
        return DataErrorCategory.REFERENCE_MISSING
    return DataErrorCategory.INFRASTRUCTURE


def _coerce(param: ProcedureParam) -> Any:
    if param.value is None:
        return None
    if param.type is ParamType.INT:
        return int(param.value)
    if param.type is ParamType.DATETIME2:
        if not isinstance(param.value, datetime):
            raise TypeError(f"@{param.name} must be a datetime")
        # DATETIME2 has no offset
        if param.value.tzinfo is not None:
            return param.value.astimezone(timezone.utc).replace(tzinfo=None)
        return param.value
    return str(param.value)


def build_exec_statement(
    procedure: str, params: Sequence[ProcedureParam],
) -> tuple[str, tuple]:
    """Render `EXEC proc @a = ?, @b = ?` with positional values."""
    if not _IDENTIFIER.fullmatch(procedure):
        raise ValueError(f"Invalid procedure name: {procedure!r}")
    for param in params:
        if not _IDENTIFIER.fullmatch(param.name) or "." in param.name:
            raise ValueError(f"Invalid parameter name: {param.name!r}")
    assignments = ", ".join(f"@{p.name} = ?" for p in params)
    statement = f"EXEC {procedure} {assignments}".rstrip()
    return statement, tuple(_coerce(p) for p in params)


def _collect_rowsets(cursor) -> list[RowSet]:
    rowsets: list[RowSet] = []
    while True:
        # Row-count-only results (INSERT/UPDATE inside the proc) have no description
        if cursor.description:
            columns = [col[0] for col in cursor.description]
            rowsets.append([dict(zip(columns, row)) for row in cursor.fetchall()])
        if not cursor.nextset():
            return rowsets


def _run_procedure(
    sync_conn: Connection, statement: str, values: tuple,
) -> list[RowSet]:
    dbapi_error = sync_conn.dialect.loaded_dbapi.Error
    cursor = sync_conn.connection.cursor()
    try:
        cursor.execute(statement, values)
        return _collect_rowsets(cursor)
    except dbapi_error as e:
        raise DBAPIError.instance(statement, values, e, dbapi_error) from e
    finally:
        cursor.close()


class ProcedureGateway:
    """Runs stored procedures over a pooled async engine."""

    def __init__(self, database_url: str, **engine_kwargs):
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine_kwargs.setdefault("pool_recycle", 3600)
        self.engine = create_async_engine(database_url, **engine_kwargs)

    async def execute(
        self, procedure: str, params: Sequence[ProcedureParam] = (),
    ) -> list[RowSet]:
        """Execute a procedure and return one list of dict rows per result set."""
        statement, values = build_exec_statement(procedure, params)
        try:
            async with self.engine.begin() as conn:
                return await conn.run_sync(_run_procedure, statement, values)
        except DBAPIError as e:
            category = classify_data_error(e)
            logger.error(
                f"DB error in {procedure} ({category.value}): {e.orig}",
                extra={"procedure": procedure},
            )
            if category is DataErrorCategory.REFERENCE_MISSING:
                raise ReferenceNotFoundError(
                    "Referenced customer or product does not exist",
                    ErrorContext(procedure=procedure),
                )
            raise DatabaseError(
                str(e.orig), "execute", ErrorContext(procedure=procedure),
            )
        except SQLAlchemyError as e:
            logger.error(
                f"SQLAlchemy error in {procedure}: {e}",
                extra={"procedure": procedure},
            )
            raise DatabaseError(str(e), "unknown", ErrorContext(procedure=procedure))

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness endpoint)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
gateway: ProcedureGateway | None = None


def init_db(database_url: str, **kwargs) -> ProcedureGateway:
    global gateway
    gateway = ProcedureGateway(database_url, **kwargs)
    return gateway


def get_executor() -> ProcedureGateway:
    """FastAPI dependency for the stored-procedure executor."""
    if not gateway:
        raise RuntimeError("Database not initialized")
    return gateway
