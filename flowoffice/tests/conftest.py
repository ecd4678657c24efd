import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from flowoffice.common.events import WorkflowEventBus
from flowoffice.core.boards.status_labels import encode_status_labels
from flowoffice.core.webhooks.store import InMemoryStaticDataStore
from flowoffice.db.base import Base
from flowoffice.db.models import *  # noqa: F401,F403 - ensure all models loaded
from flowoffice.integrations.flowoffice import FlowOfficeClient
from flowoffice.transport.schemas import BoardTree, StatusLabel

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"
TEST_BASE_URL = "https://flowoffice.test"

SALES_LABELS = [
    StatusLabel(label="Open", enum_key="open", background_color="#fff"),
    StatusLabel(label="Won", enum_key="won", background_color="#0f0"),
]


Handler = Callable[[httpx.Request], httpx.Response]


class FakeFlowOffice:
    """Routes FlowOffice API calls to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, payload: Any = None, status_code: int = 200) -> None:
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, json=payload)

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "not found"})
        return handler(request)

    def calls(self, method: str, path_prefix: str = "") -> list[httpx.Request]:
        return [
            r for r in self.requests if r.method == method and r.url.path.startswith(path_prefix)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


def sales_board_payload() -> dict[str, Any]:
    return {
        "boardId": 1,
        "name": "Sales",
        "columnSchema": [
            {"columnKey": "name", "label": "Project", "columnType": "name"},
            {
                "columnKey": "stage",
                "label": "Stage",
                "columnType": "status",
                "columnJSON": encode_status_labels(SALES_LABELS),
            },
            {"columnKey": "budget", "label": "Budget", "columnType": "number"},
            {"columnKey": "website", "label": "Website", "columnType": "link"},
            {
                "columnKey": "margin",
                "label": "Margin",
                "columnType": "formel",
                "deactivated": True,
            },
        ],
        "subBoards": [{"subboardId": 11, "name": "Leads"}, {"subboardId": 12}],
    }


def board_tree_payload() -> dict[str, Any]:
    return {
        "boardGroups": [
            {
                "groupName": "Sales",
                "boards": [
                    {"type": "board", "board": sales_board_payload()},
                    {
                        "type": "group",
                        "groupId": "regional",
                        "groupName": "Regional",
                        "boards": [
                            {
                                "boardId": 2,
                                "name": "North",
                                "columnSchema": [
                                    {"columnKey": "name", "label": "Project", "columnType": "name"},
                                    {
                                        "columnKey": "phase",
                                        "label": "Phase",
                                        "columnType": "status",
                                        "columnJSON": json.dumps(
                                            {
                                                "json": [
                                                    {
                                                        "label": "Planning",
                                                        "enumKey": "planning",
                                                        "backgroundColor": "#ccc",
                                                    }
                                                ]
                                            }
                                        ),
                                    },
                                    {
                                        "columnKey": "old_phase",
                                        "label": "Old phase",
                                        "columnType": "status",
                                        "columnJSON": json.dumps({"json": []}),
                                        "deactivated": True,
                                    },
                                ],
                            }
                        ],
                    },
                ],
            },
            {
                "groupName": "Operations",
                "boards": [
                    {
                        "type": "board",
                        "board": {
                            "boardId": 3,
                            "name": "Installations",
                            "columnSchema": [
                                {"columnKey": "name", "label": "Project", "columnType": "name"},
                                {"columnKey": "broken", "label": "Broken", "columnType": "status"},
                            ],
                        },
                    }
                ],
            },
        ]
    }


@pytest.fixture
def board_tree() -> BoardTree:
    return BoardTree.model_validate(board_tree_payload())


@pytest.fixture
def flowoffice_api() -> FakeFlowOffice:
    api = FakeFlowOffice()
    api.add("GET", "/api/v1/board/list-boards", board_tree_payload())
    api.add("GET", "/api/v1/api-key/validate", {"valid": True})
    return api


@pytest.fixture
def flowoffice_client(flowoffice_api) -> FlowOfficeClient:
    return FlowOfficeClient(
        api_key="test-key",
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(lambda request: flowoffice_api.handle(request)),
    )


@pytest.fixture
def static_store() -> InMemoryStaticDataStore:
    return InMemoryStaticDataStore()


@pytest.fixture
def event_bus() -> WorkflowEventBus:
    return WorkflowEventBus()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session, flowoffice_client, event_bus):
    from flowoffice.api.deps import get_context, get_db, get_event_bus
    from flowoffice.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_context] = lambda: flowoffice_client
    app.dependency_overrides[get_event_bus] = lambda: event_bus

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
