"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.application.interfaces.repositories import JobRepositoryInterface
from src.application.interfaces.services import OutboxInterface
from src.application.services import (
    AccountEvents,
    ApplicationRegistry,
    ConversationRouter,
    CreateJobRequest,
    EventPublisher,
    JobLifecycleEngine,
    NotificationDispatcher,
    NotificationInbox,
)
from src.domain.entities import Job
from src.infrastructure.database.models import Base
from src.infrastructure.memory import (
    InMemoryConversationRepository,
    InMemoryJobRepository,
    InMemoryNotificationRepository,
    InMemoryOutbox,
    InMemoryStore,
    InMemoryTransactionService,
)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

HOUSEHOLD_ID = "household-1"
WORKER_ID = "worker-1"
OTHER_WORKER_ID = "worker-2"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def job_repository(store):
    return InMemoryJobRepository(store)


@pytest.fixture
def notification_repository(store):
    return InMemoryNotificationRepository(store)


@pytest.fixture
def conversation_repository(store):
    return InMemoryConversationRepository(store)


@pytest.fixture
def transaction_service():
    return InMemoryTransactionService()


@pytest.fixture
def outbox(store):
    return InMemoryOutbox(store)


@pytest.fixture
def dispatcher(notification_repository):
    return NotificationDispatcher(notification_repository)


@pytest.fixture
def publisher(dispatcher, transaction_service, outbox):
    return EventPublisher(dispatcher, transaction_service, outbox)


@pytest.fixture
def engine(job_repository, transaction_service, publisher):
    return JobLifecycleEngine(job_repository, transaction_service, publisher)


@pytest.fixture
def registry(job_repository, transaction_service, publisher):
    return ApplicationRegistry(job_repository, transaction_service, publisher)


@pytest.fixture
def conversation_router(conversation_repository, transaction_service, publisher):
    return ConversationRouter(conversation_repository, transaction_service, publisher)


@pytest.fixture
def inbox(notification_repository, transaction_service):
    return NotificationInbox(notification_repository, transaction_service)


@pytest.fixture
def account_events(publisher):
    return AccountEvents(publisher)


@pytest.fixture
def mock_job_repository():
    """Mock job repository."""
    mock_repo = AsyncMock(spec=JobRepositoryInterface)

    mock_repo.get_by_id = AsyncMock()
    mock_repo.update_if_status = AsyncMock()
    mock_repo.settle_applications = AsyncMock(return_value=0)

    return mock_repo


@pytest.fixture
def mock_outbox():
    """Mock outbox."""
    return AsyncMock(spec=OutboxInterface)


def make_job_request(**overrides) -> CreateJobRequest:
    values = dict(
        title="House cleaning help",
        service_type="cleaning",
        description="Weekly cleaning of a 3 bedroom house",
        schedule="Mon-Fri 8am-5pm",
        salary=5000,
        pay_frequency="monthly",
        household_id=HOUSEHOLD_ID,
        household_name="The Mugisha Family",
        household_location="Kigali",
    )
    values.update(overrides)
    return CreateJobRequest(**values)


def make_job(**overrides) -> Job:
    values = dict(
        title="House cleaning help",
        service_type="cleaning",
        description="Weekly cleaning of a 3 bedroom house",
        schedule="Mon-Fri 8am-5pm",
        salary=5000,
        pay_frequency="monthly",
        household_id=HOUSEHOLD_ID,
    )
    values.update(overrides)
    return Job(**values)


@pytest.fixture
def create_open_job(engine):
    """Create an open job, optionally with applicants."""

    async def _create(
        applicants: Optional[List[str]] = None, registry: Optional[ApplicationRegistry] = None
    ) -> Job:
        result = await engine.create_job(make_job_request(), actor_id=HOUSEHOLD_ID)
        for worker_id in applicants or []:
            await registry.apply(result.job.id, worker_id, f"Name of {worker_id}")
        return await engine.get_job(result.job.id)

    return _create


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def client(store):
    """FastAPI test client over an in-memory store."""
    from fastapi.testclient import TestClient

    from src.api.app import create_app

    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client
