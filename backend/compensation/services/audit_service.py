"""Audit service for recording state changes to invoices and credit notes."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.repositories.audit_log_repository import AuditLogRepository


class AuditService:
    """Service for recording audit trail entries."""

    def __init__(self, db: Session):
        self.repo = AuditLogRepository(db)

    def log_action(
        self,
        resource_type: str,
        resource_id: UUID,
        company_id: UUID,
        action: str,
        data: dict[str, Any] | None = None,
        actor_type: str = "system",
        actor_id: str | None = None,
    ) -> None:
        """Log a domain action (e.g. a compensation run) with its payload."""
        self.repo.create(
            company_id=company_id,
            resource_type=resource_type,
            resource_id=resource_id,
            action=action,
            changes=data or {},
            actor_type=actor_type,
            actor_id=actor_id,
        )

    def log_status_change(
        self,
        resource_type: str,
        resource_id: UUID,
        company_id: UUID,
        old_status: str,
        new_status: str,
        actor_type: str = "system",
        actor_id: str | None = None,
    ) -> None:
        """Log a status change event."""
        if old_status == new_status:
            return
        self.repo.create(
            company_id=company_id,
            resource_type=resource_type,
            resource_id=resource_id,
            action="status_changed",
            changes={"status": {"old": old_status, "new": new_status}},
            actor_type=actor_type,
            actor_id=actor_id,
        )
