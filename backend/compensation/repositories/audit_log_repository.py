"""Repository for AuditLog operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from compensation.models.audit_log import AuditLog
from compensation.models.shared import generate_uuid


class AuditLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        company_id: UUID,
        resource_type: str,
        resource_id: UUID,
        action: str,
        changes: dict[str, Any],
        actor_type: str,
        actor_id: str | None = None,
    ) -> AuditLog:
        audit_log = AuditLog(
            id=generate_uuid(),
            company_id=company_id,
            resource_type=resource_type,
            resource_id=resource_id,
            action=action,
            changes=changes,
            actor_type=actor_type,
            actor_id=actor_id,
        )
        self.db.add(audit_log)
        # Audit rows belong to the transaction of the change they record.
        self.db.flush()
        return audit_log

    def get_by_resource(
        self,
        resource_type: str,
        resource_id: UUID,
        skip: int = 0,
        limit: int = 100,
    ) -> list[AuditLog]:
        return (
            self.db.query(AuditLog)
            .filter(
                AuditLog.resource_type == resource_type,
                AuditLog.resource_id == resource_id,
            )
            .order_by(AuditLog.created_at.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )
