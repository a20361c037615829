"""
Data Models Package

This package contains all Pydantic models used in Split Ledger.
All data flowing through the system must conform to these schemas.
"""

from splitledger.models.records import (
    Expense,
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    Payment,
    ReportPeriod,
    Resource,
    TimesheetEntry,
)
from splitledger.models.inputs import (
    ExpenseInput,
    InvoiceRequest,
    PaymentInput,
    TimesheetInput,
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.distribution import (
    DistributionReport,
    DistributionTotals,
    PaymentSummary,
    ResourceDistribution,
    ResourceHoursSummary,
    SettlementSummary,
    TimesheetSummary,
)
from splitledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Expense",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
    "Payment",
    "ReportPeriod",
    "Resource",
    "TimesheetEntry",
    # Inputs
    "ExpenseInput",
    "InvoiceRequest",
    "PaymentInput",
    "TimesheetInput",
    "ValidationIssue",
    "ValidationResult",
    # Distribution
    "DistributionReport",
    "DistributionTotals",
    "PaymentSummary",
    "ResourceDistribution",
    "ResourceHoursSummary",
    "SettlementSummary",
    "TimesheetSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
