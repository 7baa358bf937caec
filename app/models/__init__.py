from app.models.audit import AuditAction, AuditEntity, AuditLog
from app.models.garage import (
    JobCard,
    JobCardTemplate,
    JobCardTemplateItem,
    JobLineItem,
    JobPayment,
    Vehicle,
)
from app.models.inspection import (
    InspectionItemStatus,
    InspectionTemplate,
    InspectionTemplateItem,
    InspectionTemplateKind,
    InspectionType,
    JobInspection,
    JobInspectionItem,
)
from app.models.inventory import InventoryItem, StockTransaction
from app.models.ledger import Expense, ExpenseVersion, PaymentMode, Sale, SaleVersion
from app.models.staff import Advance, Attendance, Employee, PayrollPeriod, Payslip
from app.models.user import User
from app.models.vendor import Vendor, VendorPayment

__all__ = [
    "Advance",
    "Attendance",
    "AuditAction",
    "AuditEntity",
    "AuditLog",
    "Employee",
    "Expense",
    "ExpenseVersion",
    "InspectionItemStatus",
    "InspectionTemplate",
    "InspectionTemplateItem",
    "InspectionTemplateKind",
    "InspectionType",
    "InventoryItem",
    "JobCard",
    "JobCardTemplate",
    "JobCardTemplateItem",
    "JobInspection",
    "JobInspectionItem",
    "JobLineItem",
    "JobPayment",
    "PaymentMode",
    "PayrollPeriod",
    "Payslip",
    "Sale",
    "SaleVersion",
    "StockTransaction",
    "User",
    "Vehicle",
    "Vendor",
    "VendorPayment",
]
