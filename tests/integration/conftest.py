import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.adapter.repositories.records  # noqa: F401
import src.domain  # noqa: F401
from config import ApplicationConfig
from src.adapter.services.document_storage import LocalFileDocumentStorage
from src.app.services.notification_service import NotificationError, NotificationService
from src.depends import get_document_storage, get_notification_service, get_session


class RecordingNotificationService(NotificationService):
    """Collects sent messages; set fail=True to simulate a delivery outage"""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, invoice, client, template, recipient, context=None):
        if self.fail:
            raise NotificationError("delivery channel unavailable")
        self.sent.append({"invoice_id": invoice.id, "template": template, "recipient": recipient,
                          "context": context or {}})
        return f"msg-{len(self.sent)}"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database per test"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'invoices_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def notification_service():
    return RecordingNotificationService()


@pytest.fixture
def document_storage(tmp_path):
    return LocalFileDocumentStorage(str(tmp_path / "uploadPdf"))


@pytest_asyncio.fixture
async def client(session_factory, notification_service, document_storage, monkeypatch):
    """Create test client with database, storage and notification overrides"""
    from src.api.app import create_app

    monkeypatch.setattr(ApplicationConfig, "AUTH_DISABLED", True)
    app = create_app(ApplicationConfig)

    # One session per request, like the real dependency
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_document_storage] = lambda: document_storage
    app.dependency_overrides[get_notification_service] = lambda: notification_service

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
