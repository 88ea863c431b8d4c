#!/usr/bin/env python3
"""
Seed database with sample jobs, applications and messages for development.
"""

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Make the src package importable when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select  # noqa: E402

from src.application.services import (  # noqa: E402
    ApplicationRegistry,
    ConversationRouter,
    CreateJobRequest,
    EventPublisher,
    JobLifecycleEngine,
    NotificationDispatcher,
)
from src.config.database import (  # noqa: E402
    close_database_connections,
    get_async_session_factory,
)
from src.config.logging import configure_logging, get_logger  # noqa: E402
from src.domain.value_objects import Benefits  # noqa: E402
from src.infrastructure.database.models import JobModel  # noqa: E402
from src.infrastructure.database.repositories import (  # noqa: E402
    ConversationRepository,
    JobRepository,
    NotificationRepository,
    TransactionalOutbox,
    TransactionService,
)

configure_logging()
logger = get_logger(__name__)

HOUSEHOLDS = [
    ("household-demo-1", "The Mugisha Family", "Kigali, Kicukiro"),
    ("household-demo-2", "The Uwase Family", "Kigali, Remera"),
]

WORKERS = [
    ("worker-demo-1", "Alice Mukamana"),
    ("worker-demo-2", "Jean Habimana"),
    ("worker-demo-3", "Grace Ingabire"),
]

JOBS = [
    {
        "title": "Live-in house help",
        "service_type": "housekeeping",
        "description": "Cleaning, laundry and cooking for a family of four.",
        "schedule": "Mon-Sat, live-in",
        "salary": 80000,
        "pay_frequency": "monthly",
        "benefits": Benefits(accommodation=True, meals=True),
    },
    {
        "title": "Weekend gardener",
        "service_type": "gardening",
        "description": "Lawn mowing, hedge trimming and watering on weekends.",
        "schedule": "Sat-Sun 8am-12pm",
        "salary": 5000,
        "pay_frequency": "daily",
        "benefits": Benefits(transportation=True),
    },
    {
        "title": "After-school nanny",
        "service_type": "childcare",
        "description": "Pick up two children from school and help with homework.",
        "schedule": "Mon-Fri 3pm-7pm",
        "salary": 45000,
        "pay_frequency": "monthly",
        "benefits": Benefits(meals=True),
    },
]


async def seed_database():
    """Seed database with sample data unless jobs already exist."""
    async with get_async_session_factory()() as session:
        existing_jobs = (await session.execute(select(func.count()).select_from(JobModel))).scalar()
        if existing_jobs:
            logger.info("Database already has data, skipping seed", jobs=existing_jobs)
            return

        transaction_service = TransactionService(session)
        job_repository = JobRepository(session)
        publisher = EventPublisher(
            NotificationDispatcher(NotificationRepository(session)),
            transaction_service,
            TransactionalOutbox(session),
        )
        engine = JobLifecycleEngine(job_repository, transaction_service, publisher)
        registry = ApplicationRegistry(job_repository, transaction_service, publisher)
        router = ConversationRouter(
            ConversationRepository(session), transaction_service, publisher
        )

        created = []
        for index, job_data in enumerate(JOBS):
            household_id, household_name, location = HOUSEHOLDS[index % len(HOUSEHOLDS)]
            result = await engine.create_job(
                CreateJobRequest(
                    household_id=household_id,
                    household_name=household_name,
                    household_location=location,
                    **job_data,
                ),
                actor_id=household_id,
            )
            created.append(result.job)

        # Everyone applies to the first job; the household picks the first worker
        first = created[0]
        for worker_id, worker_name in WORKERS:
            await registry.apply(first.id, worker_id, worker_name)
        await engine.assign_worker(first.id, WORKERS[0][0], None, actor_id=first.household_id)
        await engine.update_eta(
            first.id,
            datetime.now(timezone.utc) + timedelta(minutes=45),
            None,
            actor_id=WORKERS[0][0],
        )

        await registry.apply(created[1].id, WORKERS[1][0], WORKERS[1][1], proposed_rate=4500)

        await router.send_message(
            first.household_id, WORKERS[0][0], "Hello, please bring your ID on the first day."
        )
        await router.send_message(WORKERS[0][0], first.household_id, "Noted, see you soon.")

        logger.info(
            "Database seeded",
            jobs=len(created),
            applications=len(WORKERS) + 1,
            messages=2,
        )


async def main():
    try:
        await seed_database()
    finally:
        await close_database_connections()


if __name__ == "__main__":
    asyncio.run(main())
