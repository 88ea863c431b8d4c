"""
FastAPI dependency injection container.
"""

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories import (
    ConversationRepositoryInterface,
    JobRepositoryInterface,
    NotificationRepositoryInterface,
)
from src.application.interfaces.services import (
    OutboxInterface,
    TransactionServiceInterface,
)
from src.application.services import (
    AccountEvents,
    ApplicationRegistry,
    ConversationRouter,
    EventPublisher,
    JobLifecycleEngine,
    NotificationDispatcher,
    NotificationInbox,
)
from src.config.database import get_db_session
from src.config.logging import bind_request_context, get_logger
from src.config.settings import settings
from src.infrastructure.database.repositories import (
    ConversationRepository,
    JobRepository,
    NotificationRepository,
    TransactionalOutbox,
    TransactionService,
)
from src.infrastructure.memory import (
    InMemoryConversationRepository,
    InMemoryJobRepository,
    InMemoryNotificationRepository,
    InMemoryOutbox,
    InMemoryStore,
    InMemoryTransactionService,
)

logger = get_logger(__name__)


# Database Dependencies
async def get_job_repository(
    db: AsyncSession = Depends(get_db_session),
) -> JobRepositoryInterface:
    """Get job repository instance."""
    return JobRepository(db)


async def get_notification_repository(
    db: AsyncSession = Depends(get_db_session),
) -> NotificationRepositoryInterface:
    """Get notification repository instance."""
    return NotificationRepository(db)


async def get_conversation_repository(
    db: AsyncSession = Depends(get_db_session),
) -> ConversationRepositoryInterface:
    """Get conversation repository instance."""
    return ConversationRepository(db)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db_session),
) -> TransactionServiceInterface:
    """Get transaction service bound to the request session."""
    return TransactionService(db)


async def get_transactional_outbox(
    db: AsyncSession = Depends(get_db_session),
) -> OutboxInterface:
    """Get transactional outbox instance."""
    return TransactionalOutbox(db)


# Service Dependencies
async def get_notification_dispatcher(
    notification_repository: NotificationRepositoryInterface = Depends(
        get_notification_repository
    ),
) -> NotificationDispatcher:
    return NotificationDispatcher(notification_repository)


async def get_event_publisher(
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    transaction_service: TransactionServiceInterface = Depends(get_transaction_service),
    outbox: OutboxInterface = Depends(get_transactional_outbox),
) -> EventPublisher:
    return EventPublisher(dispatcher, transaction_service, outbox)


async def get_job_lifecycle_engine(
    job_repository: JobRepositoryInterface = Depends(get_job_repository),
    transaction_service: TransactionServiceInterface = Depends(get_transaction_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> JobLifecycleEngine:
    return JobLifecycleEngine(job_repository, transaction_service, event_publisher)


async def get_application_registry(
    job_repository: JobRepositoryInterface = Depends(get_job_repository),
    transaction_service: TransactionServiceInterface = Depends(get_transaction_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ApplicationRegistry:
    return ApplicationRegistry(job_repository, transaction_service, event_publisher)


async def get_conversation_router(
    conversation_repository: ConversationRepositoryInterface = Depends(
        get_conversation_repository
    ),
    transaction_service: TransactionServiceInterface = Depends(get_transaction_service),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> ConversationRouter:
    return ConversationRouter(conversation_repository, transaction_service, event_publisher)


async def get_notification_inbox(
    notification_repository: NotificationRepositoryInterface = Depends(
        get_notification_repository
    ),
    transaction_service: TransactionServiceInterface = Depends(get_transaction_service),
) -> NotificationInbox:
    return NotificationInbox(notification_repository, transaction_service)


async def get_account_events(
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> AccountEvents:
    return AccountEvents(event_publisher)


async def get_actor_id(
    actor_id: Annotated[Optional[str], Header(alias=settings.ACTOR_HEADER)] = None,
) -> str:
    """Acting user id, supplied by the authentication layer in front of the API."""
    if not actor_id or not actor_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.ACTOR_HEADER} header",
        )
    bind_request_context(actor_id=actor_id)
    return actor_id


def use_in_memory_store(app: FastAPI, store: Optional[InMemoryStore] = None) -> InMemoryStore:
    """Serve every repository from an in-process store instead of the database."""
    store = store or InMemoryStore()

    async def no_session() -> AsyncGenerator[None, None]:
        yield None

    app.dependency_overrides.update(
        {
            get_db_session: no_session,
            get_job_repository: lambda: InMemoryJobRepository(store),
            get_notification_repository: lambda: InMemoryNotificationRepository(store),
            get_conversation_repository: lambda: InMemoryConversationRepository(store),
            get_transaction_service: InMemoryTransactionService,
            get_transactional_outbox: lambda: InMemoryOutbox(store),
        }
    )
    app.state.memory_store = store
    logger.info("Using in-memory store")
    return store


# Type aliases for cleaner dependency injection
JobLifecycleEngineDep = Annotated[JobLifecycleEngine, Depends(get_job_lifecycle_engine)]
ApplicationRegistryDep = Annotated[ApplicationRegistry, Depends(get_application_registry)]
ConversationRouterDep = Annotated[ConversationRouter, Depends(get_conversation_router)]
NotificationInboxDep = Annotated[NotificationInbox, Depends(get_notification_inbox)]
AccountEventsDep = Annotated[AccountEvents, Depends(get_account_events)]
ActorIdDep = Annotated[str, Depends(get_actor_id)]
