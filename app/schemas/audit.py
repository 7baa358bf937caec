from datetime import datetime

from pydantic import BaseModel

from app.models.audit import AuditAction, AuditEntity


class AuditLogOut(BaseModel):
    id: int
    user_id: int | None
    entity_type: AuditEntity
    entity_id: int
    action: AuditAction
    summary: str | None
    details: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
