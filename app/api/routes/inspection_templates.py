from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.inspection import InspectionTemplate, InspectionTemplateItem, InspectionTemplateKind
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.inspection import (
    InspectionTemplateCreate,
    InspectionTemplateItemCreate,
    InspectionTemplateItemOut,
    InspectionTemplateItemUpdate,
    InspectionTemplateOut,
    InspectionTemplateUpdate,
)
from app.services.audit import log_audit
from app.services.inspections import detach_template, detach_template_item, template_items

router = APIRouter(prefix="/inspection-templates", tags=["Inspection Templates"])


def get_inspection_template_or_404(db: Session, template_id: int) -> InspectionTemplate:
    template = db.get(InspectionTemplate, template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection template not found")
    return template


def _get_item_or_404(db: Session, template: InspectionTemplate, item_id: int) -> InspectionTemplateItem:
    item = db.get(InspectionTemplateItem, item_id)
    if not item or item.template_id != template.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection template item not found")
    return item


def inspection_template_out(db: Session, template: InspectionTemplate) -> InspectionTemplateOut:
    items = [InspectionTemplateItemOut.model_validate(item) for item in template_items(db, template.id)]
    return InspectionTemplateOut.model_validate(template).model_copy(update={"items": items})


def _add_item(
    db: Session,
    template: InspectionTemplate,
    payload: InspectionTemplateItemCreate,
) -> InspectionTemplateItem:
    sort_order = payload.sort_order
    if sort_order is None:
        current_max = db.scalar(
            select(func.max(InspectionTemplateItem.sort_order)).where(InspectionTemplateItem.template_id == template.id)
        )
        sort_order = int(current_max) + 1 if current_max is not None else 0
    item = InspectionTemplateItem(
        template_id=template.id,
        label=payload.label.strip(),
        section=clean_text(payload.section),
        sort_order=sort_order,
        is_critical=payload.is_critical,
    )
    db.add(item)
    db.flush()
    return item


@router.get("", response_model=list[InspectionTemplateOut])
def list_inspection_templates(
    kind: InspectionTemplateKind | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(InspectionTemplate).order_by(InspectionTemplate.name.asc(), InspectionTemplate.id.asc())
    if kind is not None:
        query = query.where(InspectionTemplate.kind == kind)
    if not include_inactive:
        query = query.where(InspectionTemplate.is_active.is_(True))
    return [inspection_template_out(db, template) for template in db.scalars(query).all()]


@router.post("", response_model=InspectionTemplateOut, status_code=status.HTTP_201_CREATED)
def create_inspection_template(
    payload: InspectionTemplateCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = InspectionTemplate(
        name=payload.name.strip(),
        kind=payload.kind,
        description=clean_text(payload.description),
    )
    db.add(template)
    db.flush()
    for position, item in enumerate(payload.items):
        if item.sort_order is None:
            item = item.model_copy(update={"sort_order": position})
        _add_item(db, template, item)
    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Inspection template {template.name} with {len(payload.items)} checks",
    )
    db.commit()
    db.refresh(template)
    return inspection_template_out(db, template)


@router.get("/{template_id}", response_model=InspectionTemplateOut)
def get_inspection_template(
    template_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return inspection_template_out(db, get_inspection_template_or_404(db, template_id))


@router.put("/{template_id}", response_model=InspectionTemplateOut)
def update_inspection_template(
    template_id: int,
    payload: InspectionTemplateUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = get_inspection_template_or_404(db, template_id)
    if payload.name is not None:
        template.name = payload.name.strip()
    if payload.kind is not None:
        template.kind = payload.kind
    if "description" in payload.model_fields_set:
        template.description = clean_text(payload.description)
    if payload.is_active is not None:
        template.is_active = payload.is_active
    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(template)
    return inspection_template_out(db, template)


@router.delete("/{template_id}", response_model=MessageOut)
def delete_inspection_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = get_inspection_template_or_404(db, template_id)
    detach_template(db, template)
    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.DELETE,
        current_user.id,
        summary=template.name,
    )
    db.delete(template)
    db.commit()
    return MessageOut(message="Inspection template deleted")


@router.post("/{template_id}/items", response_model=InspectionTemplateOut, status_code=status.HTTP_201_CREATED)
def add_inspection_template_item(
    template_id: int,
    payload: InspectionTemplateItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = get_inspection_template_or_404(db, template_id)
    item = _add_item(db, template, payload)
    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Added check {item.label}",
    )
    db.commit()
    db.refresh(template)
    return inspection_template_out(db, template)


@router.put("/{template_id}/items/{item_id}", response_model=InspectionTemplateOut)
def update_inspection_template_item(
    template_id: int,
    item_id: int,
    payload: InspectionTemplateItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = get_inspection_template_or_404(db, template_id)
    item = _get_item_or_404(db, template, item_id)

    if payload.label is not None:
        item.label = payload.label.strip()
    if "section" in payload.model_fields_set:
        item.section = clean_text(payload.section)
    if payload.sort_order is not None:
        item.sort_order = payload.sort_order
    if payload.is_critical is not None:
        item.is_critical = payload.is_critical

    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(template)
    return inspection_template_out(db, template)


@router.delete("/{template_id}/items/{item_id}", response_model=InspectionTemplateOut)
def delete_inspection_template_item(
    template_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = get_inspection_template_or_404(db, template_id)
    item = _get_item_or_404(db, template, item_id)
    detach_template_item(db, item.id)
    db.delete(item)
    log_audit(
        db,
        AuditEntity.INSPECTION_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Removed check {item_id}",
    )
    db.commit()
    db.refresh(template)
    return inspection_template_out(db, template)
