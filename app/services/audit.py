import json

from sqlalchemy.orm import Session

from app.models.audit import AuditAction, AuditEntity, AuditLog


def log_audit(
    db: Session,
    entity_type: AuditEntity,
    entity_id: int,
    action: AuditAction,
    user_id: int | None,
    summary: str | None = None,
    details: dict | None = None,
) -> None:
    audit = AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        user_id=user_id,
        summary=summary[:255] if summary else None,
        details=json.dumps(details, default=str) if details else None,
    )
    db.add(audit)
