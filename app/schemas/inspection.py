from datetime import datetime

from pydantic import BaseModel, Field

from app.models.inspection import InspectionItemStatus, InspectionTemplateKind, InspectionType
from app.schemas.common import OrmOut, normalized_enum

InspectionTemplateKindIn = normalized_enum(InspectionTemplateKind)
InspectionTypeIn = normalized_enum(InspectionType)
InspectionItemStatusIn = normalized_enum(InspectionItemStatus)


class InspectionTemplateItemCreate(BaseModel):
    label: str = Field(min_length=1, max_length=255)
    section: str | None = Field(default=None, max_length=80)
    sort_order: int | None = None
    is_critical: bool = False


class InspectionTemplateItemUpdate(BaseModel):
    label: str | None = Field(default=None, min_length=1, max_length=255)
    section: str | None = Field(default=None, max_length=80)
    sort_order: int | None = None
    is_critical: bool | None = None


class InspectionTemplateItemOut(OrmOut):
    id: int
    template_id: int
    label: str
    section: str | None
    sort_order: int
    is_critical: bool


class InspectionTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    kind: InspectionTemplateKindIn = InspectionTemplateKind.CUSTOM
    description: str | None = None
    items: list[InspectionTemplateItemCreate] = Field(default_factory=list)


class InspectionTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=160)
    kind: InspectionTemplateKindIn | None = None
    description: str | None = None
    is_active: bool | None = None


class InspectionTemplateOut(OrmOut):
    id: int
    name: str
    kind: InspectionTemplateKind
    description: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    items: list[InspectionTemplateItemOut] = Field(default_factory=list)


class JobInspectionCreate(BaseModel):
    template_id: int | None = None
    type: InspectionTypeIn | None = None
    name: str | None = Field(default=None, max_length=160)
    notes: str | None = None


class JobInspectionUpdate(BaseModel):
    type: InspectionTypeIn | None = None
    name: str | None = Field(default=None, max_length=160)
    notes: str | None = None


class JobInspectionItemCreate(BaseModel):
    label: str = Field(min_length=1, max_length=255)
    section: str | None = Field(default=None, max_length=80)
    is_critical: bool = False
    status: InspectionItemStatusIn = InspectionItemStatus.OK
    note: str | None = None


class JobInspectionItemUpdate(BaseModel):
    status: InspectionItemStatusIn | None = None
    note: str | None = None


class JobInspectionItemOut(OrmOut):
    id: int
    job_inspection_id: int
    template_item_id: int | None
    label: str
    section: str | None
    is_critical: bool
    status: InspectionItemStatus
    note: str | None
    created_at: datetime


class JobInspectionOut(OrmOut):
    id: int
    job_card_id: int
    template_id: int | None
    name: str | None
    type: InspectionType | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    items: list[JobInspectionItemOut] = Field(default_factory=list)
    issue_count: int = 0
    critical_issue_count: int = 0
