"""
In-Memory Storage

Dictionary-backed implementations of the storage interfaces. Used by the
tests and as the default backend when no database is configured.

Records are stored as deep copies so callers can't mutate stored state.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from splitledger.models.audit import AuditEvent
from splitledger.models.records import (
    Expense,
    Invoice,
    InvoiceStatus,
    Payment,
    TimesheetEntry,
)
from splitledger.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
)


def _in_range(day: date, date_from: Optional[date], date_to: Optional[date]) -> bool:
    if date_from and day < date_from:
        return False
    if date_to and day > date_to:
        return False
    return True


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger storage held in process memory."""

    def __init__(self):
        self._timesheets: dict[UUID, TimesheetEntry] = {}
        self._expenses: dict[UUID, Expense] = {}
        self._payments: dict[UUID, Payment] = {}
        self._invoices: dict[UUID, Invoice] = {}

    # Timesheets

    async def save_timesheet(self, entry: TimesheetEntry) -> bool:
        if entry.id in self._timesheets:
            raise DuplicateError(f"Timesheet entry {entry.id} already exists")
        self._timesheets[entry.id] = entry.model_copy(deep=True)
        return True

    async def list_timesheets(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        resource_name: Optional[str] = None,
    ) -> list[TimesheetEntry]:
        entries = [
            entry.model_copy(deep=True)
            for entry in self._timesheets.values()
            if _in_range(entry.date, date_from, date_to)
            and (resource_name is None or entry.resource_name == resource_name)
        ]
        return sorted(entries, key=lambda e: (e.date, e.created_at))

    async def delete_timesheet(self, entry_id: UUID) -> bool:
        if entry_id not in self._timesheets:
            raise NotFoundError(f"Timesheet entry {entry_id} not found")
        del self._timesheets[entry_id]
        return True

    # Expenses

    async def save_expense(self, expense: Expense) -> bool:
        if expense.id in self._expenses:
            raise DuplicateError(f"Expense {expense.id} already exists")
        self._expenses[expense.id] = expense.model_copy(deep=True)
        return True

    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        paid_by: Optional[str] = None,
    ) -> list[Expense]:
        expenses = [
            expense.model_copy(deep=True)
            for expense in self._expenses.values()
            if _in_range(expense.date, date_from, date_to)
            and (paid_by is None or expense.paid_by == paid_by)
        ]
        return sorted(expenses, key=lambda e: (e.date, e.created_at))

    async def delete_expense(self, expense_id: UUID) -> bool:
        if expense_id not in self._expenses:
            raise NotFoundError(f"Expense {expense_id} not found")
        del self._expenses[expense_id]
        return True

    # Payments

    async def save_payment(self, payment: Payment) -> bool:
        if payment.id in self._payments:
            raise DuplicateError(f"Payment {payment.id} already exists")
        self._payments[payment.id] = payment.model_copy(deep=True)
        return True

    async def list_payments(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        invoice_id: Optional[UUID] = None,
    ) -> list[Payment]:
        payments = [
            payment.model_copy(deep=True)
            for payment in self._payments.values()
            if _in_range(payment.payment_date, date_from, date_to)
            and (invoice_id is None or payment.invoice_id == invoice_id)
        ]
        return sorted(payments, key=lambda p: (p.payment_date, p.created_at))

    # Invoices

    async def save_invoice(self, invoice: Invoice) -> bool:
        if invoice.id in self._invoices:
            raise DuplicateError(f"Invoice {invoice.id} already exists")
        if any(i.invoice_number == invoice.invoice_number for i in self._invoices.values()):
            raise DuplicateError(f"Invoice number {invoice.invoice_number} already exists")
        self._invoices[invoice.id] = invoice.model_copy(deep=True)
        return True

    async def get_invoice(self, invoice_id: UUID) -> Optional[Invoice]:
        invoice = self._invoices.get(invoice_id)
        return invoice.model_copy(deep=True) if invoice else None

    async def update_invoice(self, invoice: Invoice) -> bool:
        if invoice.id not in self._invoices:
            raise NotFoundError(f"Invoice {invoice.id} not found")
        self._invoices[invoice.id] = invoice.model_copy(deep=True)
        return True

    async def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
    ) -> list[Invoice]:
        invoices = [
            invoice.model_copy(deep=True)
            for invoice in self._invoices.values()
            if _in_range(invoice.invoice_date, date_from, date_to)
            and (status is None or invoice.status == status)
        ]
        invoices.sort(key=lambda i: i.invoice_date, reverse=True)
        return invoices[:limit]

    async def get_latest_invoice(self) -> Optional[Invoice]:
        if not self._invoices:
            return None
        # dicts keep insertion order; updates don't move an invoice
        latest = next(reversed(self._invoices.values()))
        return latest.model_copy(deep=True)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in process memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
