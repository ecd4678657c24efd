"""Durable per-trigger key/value storage ("workflow static data")."""

from __future__ import annotations

import copy
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flowoffice.db.models.static_data import WorkflowStaticData


class StaticDataStore(Protocol):
    async def get(self, scope: str) -> dict[str, Any]: ...

    async def put(self, scope: str, data: dict[str, Any]) -> None: ...

    async def clear(self, scope: str) -> None: ...


class InMemoryStaticDataStore:
    """Process-local store; values are copied in and out."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}

    async def get(self, scope: str) -> dict[str, Any]:
        return copy.deepcopy(self._data.get(scope, {}))

    async def put(self, scope: str, data: dict[str, Any]) -> None:
        self._data[scope] = copy.deepcopy(data)

    async def clear(self, scope: str) -> None:
        self._data.pop(scope, None)


class SqlStaticDataStore:
    """Store backed by the ``workflow_static_data`` table.

    Writes are flushed, not committed; the session owner commits.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _row(self, scope: str) -> WorkflowStaticData | None:
        result = await self.db.execute(
            select(WorkflowStaticData).where(WorkflowStaticData.scope == scope)
        )
        return result.scalar_one_or_none()

    async def get(self, scope: str) -> dict[str, Any]:
        row = await self._row(scope)
        return dict(row.data) if row and row.data else {}

    async def put(self, scope: str, data: dict[str, Any]) -> None:
        row = await self._row(scope)
        if row is None:
            self.db.add(WorkflowStaticData(scope=scope, data=dict(data)))
        else:
            row.data = dict(data)
        await self.db.flush()

    async def clear(self, scope: str) -> None:
        row = await self._row(scope)
        if row is not None:
            await self.db.delete(row)
            await self.db.flush()
