"""Materialization Celery Tasks.

Thin wrappers around the InventoryMaterializer. A trade whose completion
transaction rolled back stays ACCEPTED with both confirmations set; the beat
schedule sweeps those up here.

Every run gets its own event loop (see ``async_task``), so the engine is
created inside the run and disposed before the loop closes. asyncpg
connections are bound to the loop that opened them.

Architecture:
    Celery Task → InventoryMaterializer → SQLAlchemyUnitOfWork
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, AsyncIterator

from celery import shared_task
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from barter.application.trading.services import InventoryMaterializer
from barter.config import bind_task_context, clear_request_context, get_settings
from barter.infrastructure.messaging import get_event_bus
from barter.infrastructure.persistence.sqlalchemy import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


@asynccontextmanager
async def run_session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory whose engine lives exactly as long as one task run."""
    engine = create_async_engine(get_settings().database_url, poolclass=NullPool)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


def async_task(f):
    """Decorator to run async function in Celery task."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(f(*args, **kwargs))
        finally:
            loop.close()
    return wrapper


@shared_task(
    bind=True,
    # Database unreachable: the whole sweep is retried
    autoretry_for=(OperationalError, ConnectionError),
    max_retries=3,
    default_retry_delay=5,
    retry_backoff=True,
    retry_jitter=True,
)
@async_task
async def retry_stalled_materializations(self, limit: int = 50) -> dict[str, Any]:
    """Retry materialization of trades stuck in ACCEPTED with both confirmations.

    Args:
        limit: Max trades per sweep.

    Returns:
        Dict with sweep statistics.
    """
    bind_task_context("retry_stalled_materializations", task_id=self.request.id, limit=limit)
    try:
        async with run_session_factory() as session_factory:
            materializer = InventoryMaterializer(
                uow=SQLAlchemyUnitOfWork(session_factory),
                event_bus=get_event_bus(),
            )
            results = await materializer.retry_stalled(limit)

        summary = {
            "materialized": sum(1 for r in results if not r.already_materialized),
            "already_materialized": sum(1 for r in results if r.already_materialized),
            "trade_ids": [r.trade_id for r in results],
        }
        logger.info("materialization_task.sweep_finished", extra=summary)
        return summary
    finally:
        clear_request_context()
