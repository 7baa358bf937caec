from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.routes.inspection_templates import get_inspection_template_or_404
from app.api.routes.jobcards import get_job_or_404
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.garage import JobCard
from app.models.inspection import JobInspection, JobInspectionItem
from app.models.user import User
from app.schemas.common import MessageOut, clean_text
from app.schemas.inspection import (
    JobInspectionCreate,
    JobInspectionItemCreate,
    JobInspectionItemOut,
    JobInspectionItemUpdate,
    JobInspectionOut,
    JobInspectionUpdate,
)
from app.services.audit import log_audit
from app.services.inspections import ISSUE_STATUSES, delete_inspection, inspection_items, start_inspection

router = APIRouter(prefix="/jobcards", tags=["Job Inspections"])


def _get_inspection_or_404(db: Session, job: JobCard, inspection_id: int) -> JobInspection:
    inspection = db.get(JobInspection, inspection_id)
    if not inspection or inspection.job_card_id != job.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection not found")
    return inspection


def _get_item_or_404(db: Session, inspection: JobInspection, item_id: int) -> JobInspectionItem:
    item = db.get(JobInspectionItem, item_id)
    if not item or item.job_inspection_id != inspection.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection item not found")
    return item


def inspection_out(db: Session, inspection: JobInspection) -> JobInspectionOut:
    items = inspection_items(db, inspection.id)
    issues = [item for item in items if item.status in ISSUE_STATUSES]
    return JobInspectionOut.model_validate(inspection).model_copy(
        update={
            "items": [JobInspectionItemOut.model_validate(item) for item in items],
            "issue_count": len(issues),
            "critical_issue_count": sum(1 for item in issues if item.is_critical),
        }
    )


@router.get("/{job_id}/inspections", response_model=list[JobInspectionOut])
def list_job_inspections(
    job_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    inspections = db.scalars(
        select(JobInspection)
        .where(JobInspection.job_card_id == job.id)
        .order_by(JobInspection.created_at.desc(), JobInspection.id.desc())
    ).all()
    return [inspection_out(db, inspection) for inspection in inspections]


@router.post("/{job_id}/inspections", response_model=JobInspectionOut, status_code=status.HTTP_201_CREATED)
def create_job_inspection(
    job_id: int,
    payload: JobInspectionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    template = None
    if payload.template_id is not None:
        template = get_inspection_template_or_404(db, payload.template_id)
        if not template.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inspection template is inactive")

    inspection = start_inspection(
        db,
        job,
        template,
        name=clean_text(payload.name),
        inspection_type=payload.type,
        notes=clean_text(payload.notes),
    )
    log_audit(
        db,
        AuditEntity.JOB_INSPECTION,
        inspection.id,
        AuditAction.CREATE,
        current_user.id,
        summary=f"Inspection on {job.job_number}" + (f" from {template.name}" if template else ""),
        details={"job_card_id": job.id, "template_id": inspection.template_id},
    )
    db.commit()
    db.refresh(inspection)
    return inspection_out(db, inspection)


@router.get("/{job_id}/inspections/{inspection_id}", response_model=JobInspectionOut)
def get_job_inspection(
    job_id: int,
    inspection_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    return inspection_out(db, _get_inspection_or_404(db, job, inspection_id))


@router.put("/{job_id}/inspections/{inspection_id}", response_model=JobInspectionOut)
def update_job_inspection(
    job_id: int,
    inspection_id: int,
    payload: JobInspectionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    inspection = _get_inspection_or_404(db, job, inspection_id)
    if "type" in payload.model_fields_set:
        inspection.type = payload.type
    if "name" in payload.model_fields_set:
        inspection.name = clean_text(payload.name)
    if "notes" in payload.model_fields_set:
        inspection.notes = clean_text(payload.notes)
    log_audit(
        db,
        AuditEntity.JOB_INSPECTION,
        inspection.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    db.commit()
    db.refresh(inspection)
    return inspection_out(db, inspection)


@router.delete("/{job_id}/inspections/{inspection_id}", response_model=MessageOut)
def delete_job_inspection(
    job_id: int,
    inspection_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    inspection = _get_inspection_or_404(db, job, inspection_id)
    log_audit(
        db,
        AuditEntity.JOB_INSPECTION,
        inspection.id,
        AuditAction.DELETE,
        current_user.id,
        summary=f"Deleted inspection on {job.job_number}",
    )
    delete_inspection(db, inspection)
    db.commit()
    return MessageOut(message="Inspection deleted")


@router.post(
    "/{job_id}/inspections/{inspection_id}/items",
    response_model=JobInspectionOut,
    status_code=status.HTTP_201_CREATED,
)
def add_job_inspection_item(
    job_id: int,
    inspection_id: int,
    payload: JobInspectionItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    inspection = _get_inspection_or_404(db, job, inspection_id)
    item = JobInspectionItem(
        job_inspection_id=inspection.id,
        label=payload.label.strip(),
        section=clean_text(payload.section),
        is_critical=payload.is_critical,
        status=payload.status,
        note=clean_text(payload.note),
    )
    db.add(item)
    db.flush()
    log_audit(
        db,
        AuditEntity.JOB_INSPECTION,
        inspection.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"Added check {item.label}",
    )
    db.commit()
    db.refresh(inspection)
    return inspection_out(db, inspection)


@router.patch("/{job_id}/inspections/{inspection_id}/items/{item_id}", response_model=JobInspectionItemOut)
def update_job_inspection_item(
    job_id: int,
    inspection_id: int,
    item_id: int,
    payload: JobInspectionItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job = get_job_or_404(db, job_id)
    inspection = _get_inspection_or_404(db, job, inspection_id)
    item = _get_item_or_404(db, inspection, item_id)

    if payload.status is not None:
        item.status = payload.status
    if "note" in payload.model_fields_set:
        item.note = clean_text(payload.note)
    # the inspection records when any of its checks last changed
    inspection.updated_at = datetime.utcnow()

    log_audit(
        db,
        AuditEntity.JOB_INSPECTION,
        inspection.id,
        AuditAction.UPDATE,
        current_user.id,
        summary=f"{item.label}: {item.status.value}",
        details={"item_id": item.id, **payload.model_dump(exclude_unset=True)},
    )
    db.commit()
    db.refresh(item)
    return item
