from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.money import from_paise, to_paise
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.garage import JobCardTemplate, JobCardTemplateCategory, JobCardTemplateItem
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.garage import (
    TemplateCreate,
    TemplateItemCreate,
    TemplateItemOut,
    TemplateItemUpdate,
    TemplateOut,
    TemplateUpdate,
)
from app.services.audit import log_audit
from app.services.job_cards import line_total_paise

router = APIRouter(prefix="/job-card-templates", tags=["Job Card Templates"])


def _get_template_or_404(db: Session, template_id: int) -> JobCardTemplate:
    template = db.get(JobCardTemplate, template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return template


def _template_items(db: Session, template_id: int) -> list[JobCardTemplateItem]:
    return list(
        db.scalars(
            select(JobCardTemplateItem)
            .where(JobCardTemplateItem.template_id == template_id)
            .order_by(JobCardTemplateItem.sort_order.asc(), JobCardTemplateItem.id.asc())
        ).all()
    )


def template_out(db: Session, template: JobCardTemplate) -> TemplateOut:
    items = _template_items(db, template.id)
    estimated = sum(line_total_paise(item.quantity, item.unit_price_paise) for item in items)
    return TemplateOut.model_validate(template).model_copy(
        update={
            "items": [TemplateItemOut.model_validate(item) for item in items],
            "estimated_total": from_paise(estimated),
        }
    )


def _add_item(db: Session, template: JobCardTemplate, payload: TemplateItemCreate) -> JobCardTemplateItem:
    sort_order = payload.sort_order
    if sort_order is None:
        current_max = db.scalar(
            select(func.max(JobCardTemplateItem.sort_order)).where(JobCardTemplateItem.template_id == template.id)
        )
        sort_order = int(current_max) + 1 if current_max is not None else 0
    item = JobCardTemplateItem(
        template_id=template.id,
        line_type=payload.line_type,
        description=payload.description.strip(),
        quantity=payload.quantity,
        unit_price_paise=to_paise(payload.unit_price),
        sort_order=sort_order,
        inventory_item_id=payload.inventory_item_id,
    )
    db.add(item)
    db.flush()
    return item


@router.get("", response_model=list[TemplateOut])
def list_templates(
    category: JobCardTemplateCategory | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(JobCardTemplate).order_by(JobCardTemplate.category.asc(), JobCardTemplate.name.asc())
    if category is not None:
        query = query.where(JobCardTemplate.category == category)
    if not include_inactive:
        query = query.where(JobCardTemplate.is_active.is_(True))
    return [template_out(db, template) for template in db.scalars(query).all()]


@router.post("", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = JobCardTemplate(
        name=payload.name.strip(),
        category=payload.category,
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
        AuditEntity.JOB_CARD_TEMPLATE,
        template.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Template {template.name} with {len(payload.items)} items",
    )
    db.commit()
    db.refresh(template)
    return template_out(db, template)


@router.get("/{template_id}", response_model=TemplateOut)
def get_template(
    template_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return template_out(db, _get_template_or_404(db, template_id))


@router.put("/{template_id}", response_model=TemplateOut)
def update_template(
    template_id: int,
    payload: TemplateUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = _get_template_or_404(db, template_id)
    if payload.name is not None:
        template.name = payload.name.strip()
    if payload.category is not None:
        template.category = payload.category
    if "description" in payload.model_fields_set:
        template.description = clean_text(payload.description)
    if payload.is_active is not None:
        template.is_active = payload.is_active
    log_audit(
        db,
        AuditEntity.JOB_CARD_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(template)
    return template_out(db, template)


@router.delete("/{template_id}", response_model=MessageOut)
def delete_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = _get_template_or_404(db, template_id)
    db.execute(delete(JobCardTemplateItem).where(JobCardTemplateItem.template_id == template.id))
    log_audit(db, AuditEntity.JOB_CARD_TEMPLATE, template.id, AuditAction.DELETE, current_user.id, summary=template.name)
    db.delete(template)
    db.commit()
    return MessageOut(message="Template deleted")


@router.post("/{template_id}/items", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
def add_template_item(
    template_id: int,
    payload: TemplateItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = _get_template_or_404(db, template_id)
    item = _add_item(db, template, payload)
    log_audit(
        db,
        AuditEntity.JOB_CARD_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Added item {item.description}",
    )
    db.commit()
    db.refresh(template)
    return template_out(db, template)


@router.put("/{template_id}/items/{item_id}", response_model=TemplateOut)
def update_template_item(
    template_id: int,
    item_id: int,
    payload: TemplateItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = _get_template_or_404(db, template_id)
    item = db.get(JobCardTemplateItem, item_id)
    if not item or item.template_id != template.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template item not found")

    if payload.line_type is not None:
        item.line_type = payload.line_type
    if payload.description is not None:
        item.description = payload.description.strip()
    if payload.quantity is not None:
        item.quantity = payload.quantity
    if payload.unit_price is not None:
        item.unit_price_paise = to_paise(payload.unit_price)
    if payload.sort_order is not None:
        item.sort_order = payload.sort_order
    if "inventory_item_id" in payload.model_fields_set:
        item.inventory_item_id = payload.inventory_item_id

    log_audit(
        db,
        AuditEntity.JOB_CARD_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(template)
    return template_out(db, template)


@router.delete("/{template_id}/items/{item_id}", response_model=TemplateOut)
def delete_template_item(
    template_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    template = _get_template_or_404(db, template_id)
    item = db.get(JobCardTemplateItem, item_id)
    if not item or item.template_id != template.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template item not found")
    db.delete(item)
    log_audit(
        db,
        AuditEntity.JOB_CARD_TEMPLATE,
        template.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Removed item {item_id}",
    )
    db.commit()
    db.refresh(template)
    return template_out(db, template)
