"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Complete traceability of recorded hours, money and invoices
2. A record of which rate and totals each settlement used
3. Debugging capability

The audit logger:
- Is async so flows can await storage writes
- Gracefully handles failures (a failed audit write never fails a flow)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from splitledger.models.audit import AuditEvent, AuditEventBuilder
from splitledger.services.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("splitledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_timesheet_recorded(
        self,
        entry_id: UUID,
        resource_name: str,
        hours: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.timesheet_recorded(
            entry_id=entry_id,
            resource_name=resource_name,
            hours=hours,
            correlation_id=correlation_id,
        ))

    async def log_expense_recorded(
        self,
        expense_id: UUID,
        paid_by: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.expense_recorded(
            expense_id=expense_id,
            paid_by=paid_by,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_record_deleted(
        self,
        entity_type: str,
        entity_id: UUID,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.record_deleted(
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))

    async def log_payment_recorded(
        self,
        payment_id: UUID,
        amount_inr: str,
        conversion_rate: str,
        invoice_id: Optional[UUID],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.payment_recorded(
            payment_id=payment_id,
            amount_inr=amount_inr,
            conversion_rate=conversion_rate,
            invoice_id=invoice_id,
            correlation_id=correlation_id,
        ))

    async def log_invoice_created(
        self,
        invoice_id: UUID,
        invoice_number: str,
        subtotal_usd: str,
        line_count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.invoice_created(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            subtotal_usd=subtotal_usd,
            line_count=line_count,
            correlation_id=correlation_id,
        ))

    async def log_invoice_paid(
        self,
        invoice_id: UUID,
        invoice_number: str,
        payment_id: UUID,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.invoice_paid(
            invoice_id=invoice_id,
            invoice_number=invoice_number,
            payment_id=payment_id,
            correlation_id=correlation_id,
        ))

    async def log_distribution_calculated(
        self,
        period_label: str,
        avg_conversion_rate: str,
        net_total: str,
        used_default_rate: bool,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.distribution_calculated(
            period_label=period_label,
            avg_conversion_rate=avg_conversion_rate,
            net_total=net_total,
            used_default_rate=used_default_rate,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        record_type: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.validation_failed(
            record_type=record_type,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a request and pass it through all
    subsequent operations.
    """
    return uuid4()
