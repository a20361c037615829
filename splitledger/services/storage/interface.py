"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Plug in a real database without touching the calculations
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Date filters are inclusive on both ends (date >= date_from AND
date <= date_to), which is what the distribution report expects.
"""

from abc import ABC, abstractmethod
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


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger record storage.

    Any storage implementation must implement these methods.
    """

    # -------------------------------------------------------------------------
    # Timesheets
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_timesheet(self, entry: TimesheetEntry) -> bool:
        """
        Save a timesheet entry.

        Raises:
            DuplicateError: If an entry with the same ID exists
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def list_timesheets(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        resource_name: Optional[str] = None,
    ) -> list[TimesheetEntry]:
        """
        List timesheet entries with optional filters, oldest first.

        Args:
            date_from: Entries on or after this date
            date_to: Entries on or before this date
            resource_name: Exact resource name match
        """
        pass

    @abstractmethod
    async def delete_timesheet(self, entry_id: UUID) -> bool:
        """
        Delete a timesheet entry.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        pass

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_expense(self, expense: Expense) -> bool:
        """Save an expense. Raises DuplicateError on a repeated ID."""
        pass

    @abstractmethod
    async def list_expenses(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        paid_by: Optional[str] = None,
    ) -> list[Expense]:
        """List expenses with optional filters, oldest first."""
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: UUID) -> bool:
        """Delete an expense. Raises NotFoundError if missing."""
        pass

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_payment(self, payment: Payment) -> bool:
        """Save a payment. Raises DuplicateError on a repeated ID."""
        pass

    @abstractmethod
    async def list_payments(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        invoice_id: Optional[UUID] = None,
    ) -> list[Payment]:
        """
        List payments with optional filters, oldest first.

        Date filters apply to payment_date.
        """
        pass

    # -------------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_invoice(self, invoice: Invoice) -> bool:
        """
        Save a new invoice.

        Raises:
            DuplicateError: If the ID or invoice number already exists
        """
        pass

    @abstractmethod
    async def get_invoice(self, invoice_id: UUID) -> Optional[Invoice]:
        """Retrieve an invoice by ID, or None."""
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> bool:
        """
        Replace a stored invoice.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        pass

    @abstractmethod
    async def list_invoices(
        self,
        status: Optional[InvoiceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 100,
    ) -> list[Invoice]:
        """List invoices, newest invoice date first."""
        pass

    @abstractmethod
    async def get_latest_invoice(self) -> Optional[Invoice]:
        """The most recently created invoice, used for numbering."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """All events for a correlation ID in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """The most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageUnavailableError(StorageError):
    """Could not reach the storage backend."""
    pass
