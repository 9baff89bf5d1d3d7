from typing import Any
from uuid import UUID

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings
from arq.jobs import Job

from compensation.core.config import settings

# Redis connection settings
redis_settings = RedisSettings.from_dsn(settings.REDIS_URL)


async def get_redis_pool() -> ArqRedis:
    """Get or create Redis pool for arq"""
    return await create_pool(redis_settings)


async def enqueue_task(task_name: str, *args: Any, **kwargs: Any) -> Job:
    """
    Enqueue a task to the arq worker.

    Args:
        task_name: Name of the task function
        *args: Positional arguments for the task
        **kwargs: Keyword arguments for the task

    Returns:
        Job object from arq
    """
    pool = await get_redis_pool()
    try:
        job = await pool.enqueue_job(task_name, *args, **kwargs)
        return job  # type: ignore[return-value]
    finally:
        await pool.close()


async def enqueue_credit_note_compensation(
    side: str, credit_note_id: UUID, company_id: UUID
) -> Job:
    """Enqueue compensation of a confirmed note.

    The job id is derived from the note so a note is never queued twice
    while a run for it is pending.
    """
    return await enqueue_task(
        "compensate_credit_note_task",
        side,
        str(credit_note_id),
        str(company_id),
        _job_id=f"compensate:{side}:{credit_note_id}",
    )
