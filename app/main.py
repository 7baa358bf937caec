import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes.advances import router as advances_router
from app.api.routes.attendance import router as attendance_router
from app.api.routes.audit import router as audit_router
from app.api.routes.auth import router as auth_router
from app.api.routes.dashboard import router as dashboard_router
from app.api.routes.employees import router as employees_router
from app.api.routes.expenses import router as expenses_router
from app.api.routes.inspection_templates import router as inspection_templates_router
from app.api.routes.inventory import router as inventory_router
from app.api.routes.job_card_templates import router as job_card_templates_router
from app.api.routes.job_inspections import router as job_inspections_router
from app.api.routes.jobcards import router as jobcards_router
from app.api.routes.payroll import router as payroll_router
from app.api.routes.sales import router as sales_router
from app.api.routes.vehicles import router as vehicles_router
from app.api.routes.vendors import router as vendors_router
from app.core.config import settings
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level, sql_echo=settings.sql_echo)
    logger.info("Starting %s", settings.app_name)
    yield
    logger.info("Stopping %s", settings.app_name)


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router)
app.include_router(employees_router)
app.include_router(advances_router)
app.include_router(attendance_router)
app.include_router(payroll_router)
app.include_router(expenses_router)
app.include_router(sales_router)
app.include_router(vendors_router)
app.include_router(inventory_router)
app.include_router(vehicles_router)
app.include_router(jobcards_router)
app.include_router(job_card_templates_router)
app.include_router(job_inspections_router)
app.include_router(inspection_templates_router)
app.include_router(dashboard_router)
app.include_router(audit_router)


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok"}
