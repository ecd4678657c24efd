from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flowoffice.common.events import WorkflowEventBus, bus
from flowoffice.core.webhooks.store import SqlStaticDataStore, StaticDataStore
from flowoffice.db.session import async_session_factory
from flowoffice.integrations.flowoffice import FlowOfficeClient
from flowoffice.transport.context import ExecutionContext


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_context() -> ExecutionContext:
    return FlowOfficeClient()


def get_static_data_store(db: AsyncSession = Depends(get_db)) -> StaticDataStore:
    return SqlStaticDataStore(db)


def get_event_bus() -> WorkflowEventBus:
    return bus
