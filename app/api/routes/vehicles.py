from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.database import get_db
from app.models.audit import AuditAction, AuditEntity
from app.models.garage import JobCard, Vehicle
from app.models.user import User
from app.schemas.common import clean_text
from app.schemas.garage import JobCardOut, VehicleCreate, VehicleHistoryOut, VehicleOut, VehicleUpdate
from app.services.audit import log_audit
from app.services.job_cards import normalize_reg_number

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])

OPTIONAL_FIELDS = ("make", "model", "variant", "fuel_type", "color", "owner_phone")


def get_vehicle_or_404(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return vehicle


@router.post("", response_model=VehicleOut, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    payload: VehicleCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reg_number = normalize_reg_number(payload.reg_number)
    if db.scalar(select(Vehicle.id).where(Vehicle.reg_number == reg_number)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Vehicle with this reg number already exists")

    vehicle = Vehicle(
        reg_number=reg_number,
        year=payload.year,
        owner_name=payload.owner_name.strip(),
        **{field: clean_text(getattr(payload, field)) for field in OPTIONAL_FIELDS},
    )
    db.add(vehicle)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vehicle with this reg number already exists",
        ) from exc
    log_audit(db, AuditEntity.VEHICLE, vehicle.id, AuditAction.CREATE, current_user.id, summary=reg_number)
    db.commit()
    db.refresh(vehicle)
    return vehicle


@router.get("", response_model=list[VehicleOut])
def list_vehicles(
    q: str | None = Query(default=None),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(Vehicle).order_by(Vehicle.updated_at.desc(), Vehicle.id.desc())
    if q and q.strip():
        term = f"%{q.strip()}%"
        query = query.where(
            or_(Vehicle.reg_number.ilike(term), Vehicle.owner_name.ilike(term), Vehicle.owner_phone.ilike(term))
        )
    return list(db.scalars(query).all())


@router.get("/by-reg/{reg_number}/history", response_model=VehicleHistoryOut)
def vehicle_history(
    reg_number: str,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vehicle = db.scalar(select(Vehicle).where(Vehicle.reg_number == normalize_reg_number(reg_number)))
    if not vehicle:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    jobs = db.scalars(
        select(JobCard).where(JobCard.vehicle_id == vehicle.id).order_by(JobCard.in_date.desc(), JobCard.id.desc())
    ).all()
    return VehicleHistoryOut(
        vehicle=VehicleOut.model_validate(vehicle),
        job_cards=[JobCardOut.model_validate(job) for job in jobs],
    )


@router.get("/{vehicle_id}", response_model=VehicleOut)
def get_vehicle(
    vehicle_id: int,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_vehicle_or_404(db, vehicle_id)


@router.put("/{vehicle_id}", response_model=VehicleOut)
def update_vehicle(
    vehicle_id: int,
    payload: VehicleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    vehicle = get_vehicle_or_404(db, vehicle_id)

    if payload.reg_number is not None:
        vehicle.reg_number = normalize_reg_number(payload.reg_number)
    if payload.owner_name is not None:
        vehicle.owner_name = payload.owner_name.strip()
    if "year" in payload.model_fields_set:
        vehicle.year = payload.year
    for field in OPTIONAL_FIELDS:
        if field in payload.model_fields_set:
            setattr(vehicle, field, clean_text(getattr(payload, field)))

    log_audit(
        db,
        AuditEntity.VEHICLE,
        vehicle.id,
        AuditAction.UPDATE,
        current_user.id,
        details=payload.model_dump(exclude_unset=True),
    )
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vehicle with this reg number already exists",
        ) from exc
    db.refresh(vehicle)
    return vehicle
