"""Celery tasks."""

from .materialization_tasks import retry_stalled_materializations

__all__ = ["retry_stalled_materializations"]
