"""
Audit Models for Split Ledger

Every change to the ledger and every settlement calculation is logged.
This provides:
1. A history of who recorded what, and when
2. Debugging information when numbers look wrong
3. The ability to reconstruct how a settlement was reached

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record keeping
    TIMESHEET_RECORDED = "timesheet_recorded"
    TIMESHEET_DELETED = "timesheet_deleted"
    EXPENSE_RECORDED = "expense_recorded"
    EXPENSE_DELETED = "expense_deleted"
    PAYMENT_RECORDED = "payment_recorded"

    # Invoicing
    INVOICE_CREATED = "invoice_created"
    INVOICE_PAID = "invoice_paid"

    # Settlement
    DISTRIBUTION_CALCULATED = "distribution_calculated"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'timesheet', 'invoice', 'report')"
    )
    entity_id: Optional[UUID] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one request)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.invoice_created(invoice_id, number, total, correlation_id)
    """

    @staticmethod
    def timesheet_recorded(
        entry_id: UUID,
        resource_name: str,
        hours: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TIMESHEET_RECORDED,
            entity_type="timesheet",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Timesheet recorded: {resource_name} - {hours}h",
            details={
                "resource_name": resource_name,
                "hours_worked": hours,
            },
        )

    @staticmethod
    def expense_recorded(
        expense_id: UUID,
        paid_by: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_RECORDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense recorded: ₹{amount} paid by {paid_by}",
            details={
                "paid_by": paid_by,
                "amount_inr": amount,
            },
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        event_type = (
            AuditEventType.TIMESHEET_DELETED
            if entity_type == "timesheet"
            else AuditEventType.EXPENSE_DELETED
        )
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def payment_recorded(
        payment_id: UUID,
        amount_inr: str,
        conversion_rate: str,
        invoice_id: Optional[UUID],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_RECORDED,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment recorded: ₹{amount_inr} at {conversion_rate}",
            details={
                "amount_inr_received": amount_inr,
                "conversion_rate": conversion_rate,
                "invoice_id": str(invoice_id) if invoice_id else None,
            },
        )

    @staticmethod
    def invoice_created(
        invoice_id: UUID,
        invoice_number: str,
        subtotal_usd: str,
        line_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_CREATED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice created: {invoice_number} - ${subtotal_usd}",
            details={
                "invoice_number": invoice_number,
                "subtotal_usd": subtotal_usd,
                "line_count": line_count,
            },
        )

    @staticmethod
    def invoice_paid(
        invoice_id: UUID,
        invoice_number: str,
        payment_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_PAID,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice marked paid: {invoice_number}",
            details={
                "payment_id": str(payment_id),
            },
        )

    @staticmethod
    def distribution_calculated(
        period_label: str,
        avg_conversion_rate: str,
        net_total: str,
        used_default_rate: bool,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DISTRIBUTION_CALCULATED,
            severity=AuditSeverity.WARNING if used_default_rate else AuditSeverity.INFO,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Distribution calculated for {period_label}",
            details={
                "avg_conversion_rate": avg_conversion_rate,
                "net_withdrawal_total": net_total,
                "used_default_rate": used_default_rate,
            },
        )

    @staticmethod
    def validation_failed(
        record_type: str,
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=record_type,
            correlation_id=correlation_id,
            description=f"{record_type.capitalize()} validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
