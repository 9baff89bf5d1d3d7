"""Errors raised by the compensation engine.

Every failure reaches the caller as a subclass of :class:`CompensationError`.
Database failures are translated by :func:`engine_savepoint`, which runs
the engine's writes in a SAVEPOINT so no partial compensation survives,
and by :func:`persistence_guard` for callers that own the whole session.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


class CompensationError(Exception):
    """Base error for the compensation engine."""

    retryable = False


class DocumentNotFound(CompensationError):
    """The requested invoice or note does not exist in the tenant."""


class InvoiceNotFound(DocumentNotFound):
    pass


class CreditNoteNotFound(DocumentNotFound):
    pass


class InvalidDocumentState(CompensationError):
    """The document is not in a state that allows the requested operation."""


class InvalidCreditNoteState(InvalidDocumentState):
    """The credit/debit note cannot be compensated or reversed as it stands."""


class TransactionConflict(CompensationError):
    """A concurrent transaction modified the same invoices. Safe to retry."""

    retryable = True


class PersistenceFailure(CompensationError):
    """A write failed; the whole run was rolled back."""


def is_conflict(exc: DBAPIError) -> bool:
    """True when the driver reports a serialization failure or lock contention."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in CONFLICT_SQLSTATES:
        return True
    return "database is locked" in str(orig)


def translate_database_error(exc: SQLAlchemyError, operation: str) -> CompensationError:
    """Map a SQLAlchemy failure onto the engine's error taxonomy."""
    if isinstance(exc, StaleDataError):
        logger.warning("Concurrent modification during %s: %s", operation, exc)
        return TransactionConflict(f"Concurrent modification during {operation}")
    if isinstance(exc, DBAPIError):
        if is_conflict(exc):
            logger.warning("Serialization conflict during %s: %s", operation, exc)
            return TransactionConflict(f"Serialization conflict during {operation}")
        logger.exception("Database error during %s", operation)
        return PersistenceFailure(f"Database error during {operation}")
    logger.exception("Persistence failure during %s", operation)
    return PersistenceFailure(f"Persistence failure during {operation}")


@contextmanager
def engine_savepoint(db: Session, operation: str) -> Iterator[None]:
    """Run the block inside a SAVEPOINT, translating database errors.

    On failure only the block's own writes are rolled back. Whatever the
    caller did earlier in the transaction is left for the caller to commit
    or roll back.
    """
    try:
        with db.begin_nested():
            yield
    except SQLAlchemyError as exc:
        raise translate_database_error(exc, operation) from exc


@contextmanager
def persistence_guard(db: Session, operation: str) -> Iterator[None]:
    """Roll the whole session back on any error, translating database errors."""
    try:
        yield
    except CompensationError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_database_error(exc, operation) from exc
    except Exception:
        db.rollback()
        raise
