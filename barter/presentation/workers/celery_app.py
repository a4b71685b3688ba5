"""Celery Application Configuration.

Production-ready Celery setup with:
- Redis broker and result backend
- Task retry policies
- Beat scheduler for periodic tasks
- Structured logging

Usage:
    # Start worker
    celery -A barter.presentation.workers worker --loglevel=info

    # Start beat scheduler
    celery -A barter.presentation.workers beat --loglevel=info

    # Start both (development only)
    celery -A barter.presentation.workers worker --beat --loglevel=info
"""

from celery import Celery
from celery.signals import worker_process_init

from barter.config import get_settings, setup_logging

settings = get_settings()

MATERIALIZATION_TASKS = "barter.presentation.workers.tasks.materialization_tasks"

# Create Celery app
celery_app = Celery(
    "barter_workers",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[MATERIALIZATION_TASKS],
)

# Celery configuration
celery_app.conf.update(
    # ==================== Task Settings ====================
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution
    task_acks_late=settings.celery_task_acks_late,
    task_reject_on_worker_lost=settings.celery_task_reject_on_worker_lost,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # Soft limit 4 minutes

    # Result backend
    result_expires=3600,  # Results expire after 1 hour

    # ==================== Worker Settings ====================
    worker_prefetch_multiplier=1,  # One task at a time for fair distribution
    worker_concurrency=settings.celery_worker_concurrency,
    worker_max_tasks_per_child=1000,  # Restart worker after N tasks (memory leaks)
    worker_disable_rate_limits=False,

    # ==================== Broker Settings ====================
    broker_connection_retry_on_startup=True,
    broker_connection_retry=True,
    broker_connection_max_retries=10,

    # ==================== Beat Scheduler ====================
    beat_schedule={
        # Finish trades whose materialization was rolled back
        "retry-stalled-materializations": {
            "task": f"{MATERIALIZATION_TASKS}.retry_stalled_materializations",
            "schedule": settings.materialization_retry_interval,
            "kwargs": {"limit": settings.materialization_retry_batch_size},
        },
    },

    # ==================== Task Routes ====================
    task_routes={
        f"{MATERIALIZATION_TASKS}.*": {"queue": "trades"},
    },

    # ==================== Default Queue ====================
    task_default_queue="default",
    task_default_exchange="default",
    task_default_routing_key="default",
)

# One retry sweep at a time is enough
celery_app.conf.task_annotations = {
    f"{MATERIALIZATION_TASKS}.retry_stalled_materializations": {"rate_limit": "10/m"},
}


@worker_process_init.connect
def init_worker_logging(**kwargs) -> None:
    """Configure structlog in every worker process."""
    setup_logging()
