"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Stored procedures are reached only through ProcedureExecutor
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass a plain fake
    - Row-sets are lists of plain dicts: one list per result set, in the
      order the procedure emits them
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from orderdesk.core.domain_types import ParamType

RowSet = list[dict[str, Any]]


@dataclass(frozen=True)
class ProcedureParam:
    """A named, typed stored-procedure argument."""
    name: str
    value: Any
    type: ParamType


class ProcedureExecutor(Protocol):
    """Contract for running a stored procedure — implemented by shell."""
    async def execute(
        self, procedure: str, params: Sequence[ProcedureParam] = (),
    ) -> list[RowSet]: ...
