import logging
from typing import Any
from uuid import UUID

from arq import Retry

from compensation.core.config import settings
from compensation.core.database import compensation_session
from compensation.core.logging import configure_logging
from compensation.services.compensation import (
    CreditNoteCompensationService,
    TransactionConflict,
)
from compensation.tasks import redis_settings

logger = logging.getLogger(__name__)


async def compensate_credit_note_task(
    ctx: dict[str, Any], side: str, credit_note_id: str, company_id: str
) -> dict[str, Any]:
    """Background task: compensate a confirmed credit or debit note.

    Runs in its own serializable transaction. A conflict with a concurrent
    run is retried with a linearly growing delay until the job runs out of
    tries.
    """
    try:
        with compensation_session() as db:
            service = CreditNoteCompensationService(db, side)
            result = service.compensate(UUID(credit_note_id), UUID(company_id))
    except TransactionConflict:
        job_try = ctx.get("job_try", 1)
        if job_try >= settings.COMPENSATION_MAX_TRIES:
            logger.error(
                "Giving up compensation of credit note %s after %d tries",
                credit_note_id,
                job_try,
            )
            raise
        logger.warning(
            "Compensation of credit note %s conflicted (try %d), retrying",
            credit_note_id,
            job_try,
        )
        raise Retry(defer=job_try * settings.COMPENSATION_RETRY_DELAY_SECONDS) from None

    return {
        "credit_note_id": str(result.credit_note_id),
        "applications": len(result.applications),
        "unapplied": str(result.unapplied),
    }


async def startup(ctx: dict[str, Any]) -> None:
    configure_logging()


class WorkerSettings:
    functions = [compensate_credit_note_task]
    on_startup = startup
    max_tries = settings.COMPENSATION_MAX_TRIES
    redis_settings = redis_settings
