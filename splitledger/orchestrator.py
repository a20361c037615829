"""
Main Orchestrator for Split Ledger

This module ties together validation, storage, calculations and audit
into the end-to-end flows:
1. Record keeping (timesheets, expenses)
2. Invoicing (period timesheets → numbered draft invoice)
3. Payments (payment → linked invoice marked Paid)
4. Distribution (period records → settlement report)

DESIGN DECISION: The orchestrator owns every side effect.
- Nothing reaches storage without passing validation
- The calculations only ever see records fetched here
- Every change is audited
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from splitledger.audit import AuditLogger, create_correlation_id
from splitledger.calculations import (
    build_invoice,
    build_payment,
    compute_distribution,
    mark_invoice_paid,
    next_sequence_number,
    summarize_timesheets,
)
from splitledger.config import get_settings
from splitledger.models.distribution import DistributionReport, TimesheetSummary
from splitledger.models.inputs import ValidationResult
from splitledger.models.records import (
    Expense,
    Invoice,
    Payment,
    ReportPeriod,
    TimesheetEntry,
)
from splitledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    NotFoundError,
    StorageUnavailableError,
)
from splitledger.validation import RecordValidator


class InputValidationError(Exception):
    """Submitted data failed validation. Carries the full result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            f"{issue.field}: {issue.message}"
            for issue in result.issues
            if issue.severity == "error"
        )
        super().__init__(f"Invalid {result.record_type}: {messages}")


def storage_retry():
    """Retry policy for calls that may hit an unavailable backend."""
    attempts = get_settings().app.storage_retry_attempts
    return retry(
        retry=retry_if_exception_type(StorageUnavailableError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )


async def _audit_invalid(
    audit_logger: Optional[AuditLogger],
    result: ValidationResult,
    correlation_id: UUID,
) -> None:
    if audit_logger:
        await audit_logger.log_validation_failed(
            record_type=result.record_type,
            issues=[
                {"field": i.field, "type": i.issue_type, "message": i.message}
                for i in result.issues
            ],
            correlation_id=correlation_id,
        )


class RecordFlow:
    """
    Records timesheet entries and shared expenses.

    Flow:
    1. Validate → two-stage validation of the submitted form
    2. Build → create the stored record
    3. Save → persist
    4. Audit
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger

    async def record_timesheet(
        self,
        data: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> TimesheetEntry:
        """
        Validate and save a timesheet entry.

        Raises:
            InputValidationError: If the submitted data is invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        form, result = self._validator.validate_timesheet(data)
        if form is None:
            await _audit_invalid(self._audit_logger, result, correlation_id)
            raise InputValidationError(result)

        entry = TimesheetEntry(
            date=form.date,
            resource_name=form.resource_name.value,
            hours_worked=form.hours_worked,
            hourly_rate=form.hourly_rate,
            project_name=form.project_name,
            client_name=form.client_name,
            description=form.description,
        )
        await self._storage.save_timesheet(entry)

        if self._audit_logger:
            await self._audit_logger.log_timesheet_recorded(
                entry_id=entry.id,
                resource_name=entry.resource_name,
                hours=str(entry.hours_worked),
                correlation_id=correlation_id,
            )

        return entry

    async def record_expense(
        self,
        data: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Validate and save a shared expense.

        Raises:
            InputValidationError: If the submitted data is invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        form, result = self._validator.validate_expense(data)
        if form is None:
            await _audit_invalid(self._audit_logger, result, correlation_id)
            raise InputValidationError(result)

        expense = Expense(
            date=form.date,
            description=form.description,
            amount_inr=form.amount_inr,
            paid_by=form.paid_by.value,
            category=form.category,
        )
        await self._storage.save_expense(expense)

        if self._audit_logger:
            await self._audit_logger.log_expense_recorded(
                expense_id=expense.id,
                paid_by=expense.paid_by,
                amount=str(expense.amount_inr),
                correlation_id=correlation_id,
            )

        return expense

    async def delete_timesheet(
        self,
        entry_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        correlation_id = correlation_id or create_correlation_id()
        await self._storage.delete_timesheet(entry_id)
        if self._audit_logger:
            await self._audit_logger.log_record_deleted("timesheet", entry_id, correlation_id)

    async def delete_expense(
        self,
        expense_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        correlation_id = correlation_id or create_correlation_id()
        await self._storage.delete_expense(expense_id)
        if self._audit_logger:
            await self._audit_logger.log_record_deleted("expense", expense_id, correlation_id)

    async def summarize_timesheets(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> TimesheetSummary:
        """Per-resource hours and amounts for the window."""
        entries = await self._storage.list_timesheets(date_from=date_from, date_to=date_to)
        return summarize_timesheets(entries)


class InvoiceFlow:
    """
    Raises invoices from timesheets.

    Flow:
    1. Validate the invoice request
    2. Fetch timesheets for the billing period
    3. Continue numbering from the latest invoice
    4. Build and save the draft invoice
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger

    async def create_invoice(
        self,
        data: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Invoice:
        """
        Create a draft invoice for a billing period.

        Raises:
            InputValidationError: If the request is invalid
            NoBillableTimesheetsError: If no timesheets fall in the period
        """
        correlation_id = correlation_id or create_correlation_id()

        if "conversion_rate" not in data:
            data = {
                **data,
                "conversion_rate": get_settings().billing.default_invoice_conversion_rate,
            }

        request, result = self._validator.validate_invoice_request(data)
        if request is None:
            await _audit_invalid(self._audit_logger, result, correlation_id)
            raise InputValidationError(result)

        timesheets = await self._storage.list_timesheets(
            date_from=request.billing_period_start,
            date_to=request.billing_period_end,
        )
        latest = await self._storage.get_latest_invoice()
        sequence = next_sequence_number(
            latest.invoice_number if latest else None,
            first_sequence=get_settings().billing.first_invoice_sequence,
        )

        invoice = build_invoice(request, timesheets, sequence)
        await self._storage.save_invoice(invoice)

        if self._audit_logger:
            await self._audit_logger.log_invoice_created(
                invoice_id=invoice.id,
                invoice_number=invoice.invoice_number,
                subtotal_usd=str(invoice.subtotal_usd),
                line_count=len(invoice.line_items),
                correlation_id=correlation_id,
            )

        return invoice


class PaymentFlow:
    """
    Records client payments.

    A payment linked to an invoice marks that invoice Paid.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger

    async def record_payment(
        self,
        data: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> Payment:
        """
        Validate and save a payment.

        Raises:
            InputValidationError: If the submitted data is invalid
            NotFoundError: If the linked invoice doesn't exist
        """
        correlation_id = correlation_id or create_correlation_id()

        form, result = self._validator.validate_payment(data)
        if form is None:
            await _audit_invalid(self._audit_logger, result, correlation_id)
            raise InputValidationError(result)

        invoice = None
        if form.invoice_id:
            invoice = await self._storage.get_invoice(form.invoice_id)
            if invoice is None:
                raise NotFoundError(f"Invoice {form.invoice_id} not found")

        payment = build_payment(form)
        await self._storage.save_payment(payment)

        if self._audit_logger:
            await self._audit_logger.log_payment_recorded(
                payment_id=payment.id,
                amount_inr=str(payment.amount_inr_received),
                conversion_rate=str(payment.conversion_rate),
                invoice_id=payment.invoice_id,
                correlation_id=correlation_id,
            )

        if invoice is not None:
            paid = mark_invoice_paid(invoice, payment.payment_date)
            await self._storage.update_invoice(paid)
            if self._audit_logger:
                await self._audit_logger.log_invoice_paid(
                    invoice_id=paid.id,
                    invoice_number=paid.invoice_number,
                    payment_id=payment.id,
                    correlation_id=correlation_id,
                )

        return payment


class DistributionFlow:
    """
    Produces the revenue distribution for a period.

    Flow:
    1. Fetch timesheets, payments and expenses for the window
    2. Compute the distribution with the configured default rate
    3. Audit the rate and totals used
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        default_rate: Optional[Decimal] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._default_rate = default_rate

    async def _fetch_records(
        self,
        date_from: Optional[date],
        date_to: Optional[date],
    ) -> tuple[list[TimesheetEntry], list[Payment], list[Expense]]:
        @storage_retry()
        async def fetch():
            timesheets = await self._storage.list_timesheets(date_from=date_from, date_to=date_to)
            payments = await self._storage.list_payments(date_from=date_from, date_to=date_to)
            expenses = await self._storage.list_expenses(date_from=date_from, date_to=date_to)
            return timesheets, payments, expenses

        return await fetch()

    async def calculate(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DistributionReport:
        """
        Calculate the distribution for [date_from, date_to].

        Either bound may be omitted for an open-ended window.

        Raises:
            StorageUnavailableError: If storage stays unreachable after retries
            Exception: Any other fetch failure, after auditing it as a system error
        """
        correlation_id = correlation_id or create_correlation_id()
        period = ReportPeriod(start=date_from, end=date_to)

        try:
            timesheets, payments, expenses = await self._fetch_records(date_from, date_to)
        except StorageUnavailableError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="distribution_fetch",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": "distribution_fetch"},
                    correlation_id=correlation_id,
                )
            raise

        default_rate = self._default_rate
        if default_rate is None:
            default_rate = get_settings().settlement.default_conversion_rate
        report = compute_distribution(
            timesheets,
            payments,
            expenses,
            period=period,
            default_rate=default_rate,
        )

        if self._audit_logger:
            await self._audit_logger.log_distribution_calculated(
                period_label=period.label,
                avg_conversion_rate=str(report.payments.avg_conversion_rate),
                net_total=str(report.totals.net_withdrawal),
                used_default_rate=report.payments.used_default_rate,
                correlation_id=correlation_id,
            )

        return report


class AppComponents:
    """All flows wired to one storage backend."""

    def __init__(
        self,
        storage: LedgerStorageInterface,
        audit_logger: AuditLogger,
    ):
        validator = RecordValidator()
        self.storage = storage
        self.audit_logger = audit_logger
        self.records = RecordFlow(storage, validator, audit_logger)
        self.invoices = InvoiceFlow(storage, validator, audit_logger)
        self.payments = PaymentFlow(storage, validator, audit_logger)
        self.distribution = DistributionFlow(storage, audit_logger)


def create_app_components(
    storage: Optional[LedgerStorageInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage: Ledger storage backend. Defaults to in-memory storage.
        audit_logger: Audit logger. Defaults to one backed by
                      in-memory audit storage.
    """
    storage = storage or InMemoryLedgerStorage()
    audit_logger = audit_logger or AuditLogger(InMemoryAuditStorage())
    return AppComponents(storage, audit_logger)
