from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.document_storage import LocalFileDocumentStorage
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.document_storage import DocumentStorage
from src.app.services.notification_service import NotificationService
from src.app.services.pdf_service import PdfService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db() -> None:
    # Registers every table on SQLModel.metadata
    import src.adapter.repositories.records  # noqa: F401
    import src.domain  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_pdf_service() -> PdfService:
    return ReportLabPdfService(
        company_name=ApplicationConfig.COMPANY_NAME,
        currency=ApplicationConfig.CURRENCY,
    )


def get_document_storage() -> DocumentStorage:
    return LocalFileDocumentStorage(ApplicationConfig.PDF_STORAGE_DIR)


def get_notification_service() -> NotificationService:
    return create_notification_service(
        webhook_url=ApplicationConfig.NOTIFICATION_WEBHOOK_URL,
        timeout=ApplicationConfig.NOTIFICATION_TIMEOUT_SECONDS,
        company_name=ApplicationConfig.COMPANY_NAME,
    )
