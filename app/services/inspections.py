import logging

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from app.models.garage import JobCard
from app.models.inspection import (
    InspectionItemStatus,
    InspectionTemplate,
    InspectionTemplateItem,
    InspectionType,
    JobInspection,
    JobInspectionItem,
)

logger = logging.getLogger(__name__)

ISSUE_STATUSES = (InspectionItemStatus.NOT_OK, InspectionItemStatus.ATTENTION)


def template_items(db: Session, template_id: int) -> list[InspectionTemplateItem]:
    return list(
        db.scalars(
            select(InspectionTemplateItem)
            .where(InspectionTemplateItem.template_id == template_id)
            .order_by(InspectionTemplateItem.sort_order.asc(), InspectionTemplateItem.id.asc())
        ).all()
    )


def inspection_items(db: Session, inspection_id: int) -> list[JobInspectionItem]:
    return list(
        db.scalars(
            select(JobInspectionItem)
            .where(JobInspectionItem.job_inspection_id == inspection_id)
            .order_by(JobInspectionItem.id.asc())
        ).all()
    )


def start_inspection(
    db: Session,
    job: JobCard,
    template: InspectionTemplate | None,
    *,
    name: str | None,
    inspection_type: InspectionType | None,
    notes: str | None,
) -> JobInspection:
    """Open an inspection on a job card, seeding one OK item per template item."""
    inspection = JobInspection(
        job_card_id=job.id,
        template_id=template.id if template else None,
        name=name or (template.name if template else None),
        type=inspection_type,
        notes=notes,
    )
    db.add(inspection)
    db.flush()

    copied = 0
    if template is not None:
        for template_item in template_items(db, template.id):
            db.add(
                JobInspectionItem(
                    job_inspection_id=inspection.id,
                    template_item_id=template_item.id,
                    label=template_item.label,
                    section=template_item.section,
                    is_critical=template_item.is_critical,
                    status=InspectionItemStatus.OK,
                )
            )
            copied += 1
        db.flush()

    logger.info("Started inspection %s on job %s with %d items", inspection.id, job.job_number, copied)
    return inspection


def delete_inspection(db: Session, inspection: JobInspection) -> None:
    db.execute(delete(JobInspectionItem).where(JobInspectionItem.job_inspection_id == inspection.id))
    db.delete(inspection)
    db.flush()


def delete_job_inspections(db: Session, job_id: int) -> int:
    inspection_ids = list(db.scalars(select(JobInspection.id).where(JobInspection.job_card_id == job_id)).all())
    if not inspection_ids:
        return 0
    db.execute(delete(JobInspectionItem).where(JobInspectionItem.job_inspection_id.in_(inspection_ids)))
    db.execute(delete(JobInspection).where(JobInspection.id.in_(inspection_ids)))
    db.flush()
    return len(inspection_ids)


def detach_template_item(db: Session, template_item_id: int) -> None:
    db.execute(
        update(JobInspectionItem)
        .where(JobInspectionItem.template_item_id == template_item_id)
        .values(template_item_id=None)
        .execution_options(synchronize_session="fetch")
    )


def detach_template(db: Session, template: InspectionTemplate) -> None:
    """Unlink recorded inspections from a template that is about to be removed."""
    item_ids = select(InspectionTemplateItem.id).where(InspectionTemplateItem.template_id == template.id)
    db.execute(
        update(JobInspectionItem)
        .where(JobInspectionItem.template_item_id.in_(item_ids))
        .values(template_item_id=None)
        .execution_options(synchronize_session="fetch")
    )
    db.execute(
        update(JobInspection)
        .where(JobInspection.template_id == template.id)
        .values(template_id=None)
        .execution_options(synchronize_session="fetch")
    )
    db.execute(delete(InspectionTemplateItem).where(InspectionTemplateItem.template_id == template.id))
    db.flush()
