"""
Tests for the in-memory storage backends.
"""

from datetime import date
from decimal import Decimal

import pytest

from splitledger.models.audit import AuditEvent, AuditEventType
from splitledger.models.records import Invoice, InvoiceStatus, Resource
from splitledger.services.storage import DuplicateError, NotFoundError

from factories import make_expense, make_payment, make_timesheet


def _invoice(number, invoice_date=date(2025, 2, 1)):
    return Invoice(
        invoice_number=number,
        invoice_date=invoice_date,
        billing_period_start=date(2025, 1, 1),
        billing_period_end=date(2025, 1, 31),
        client_name="Acme",
        resources=[Resource.AMIT],
        subtotal_usd=Decimal("100"),
        total_inr=Decimal("9000"),
    )


class TestLedgerStorage:
    """Filters, ordering and error cases."""

    @pytest.mark.asyncio
    async def test_timesheet_filters(self, ledger_storage):
        await ledger_storage.save_timesheet(make_timesheet("Amit", day=date(2025, 1, 31)))
        await ledger_storage.save_timesheet(make_timesheet("Abhilash", day=date(2025, 1, 1)))
        await ledger_storage.save_timesheet(make_timesheet("Amit", day=date(2025, 2, 1)))

        january = await ledger_storage.list_timesheets(
            date_from=date(2025, 1, 1), date_to=date(2025, 1, 31),
        )
        assert [e.date for e in january] == [date(2025, 1, 1), date(2025, 1, 31)]

        amit = await ledger_storage.list_timesheets(resource_name="Amit")
        assert len(amit) == 2

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, ledger_storage):
        expense = make_expense()
        await ledger_storage.save_expense(expense)
        with pytest.raises(DuplicateError):
            await ledger_storage.save_expense(expense)

    @pytest.mark.asyncio
    async def test_stored_copies_are_isolated(self, ledger_storage):
        expense = make_expense(description="Rent")
        await ledger_storage.save_expense(expense)
        stored = (await ledger_storage.list_expenses())[0]
        stored.description = "Changed"
        assert (await ledger_storage.list_expenses())[0].description == "Rent"

    @pytest.mark.asyncio
    async def test_expense_payer_filter(self, ledger_storage):
        await ledger_storage.save_expense(make_expense("Amit"))
        await ledger_storage.save_expense(make_expense("Abhilash"))
        paid = await ledger_storage.list_expenses(paid_by="Abhilash")
        assert [e.paid_by for e in paid] == ["Abhilash"]

    @pytest.mark.asyncio
    async def test_payments_by_invoice(self, ledger_storage):
        invoice = _invoice("Invoice_Amit_FY25-26-1001")
        await ledger_storage.save_payment(make_payment(invoice_id=invoice.id))
        await ledger_storage.save_payment(make_payment())
        linked = await ledger_storage.list_payments(invoice_id=invoice.id)
        assert len(linked) == 1

    @pytest.mark.asyncio
    async def test_duplicate_invoice_number(self, ledger_storage):
        await ledger_storage.save_invoice(_invoice("Invoice_Amit_FY25-26-1001"))
        with pytest.raises(DuplicateError):
            await ledger_storage.save_invoice(_invoice("Invoice_Amit_FY25-26-1001"))

    @pytest.mark.asyncio
    async def test_latest_invoice_and_status_filter(self, ledger_storage):
        assert await ledger_storage.get_latest_invoice() is None

        first = _invoice("Invoice_Amit_FY25-26-1001", date(2025, 2, 1))
        second = _invoice("Invoice_Amit_FY25-26-1002", date(2025, 3, 1))
        await ledger_storage.save_invoice(first)
        await ledger_storage.save_invoice(second)
        await ledger_storage.update_invoice(first.model_copy(update={"status": InvoiceStatus.PAID}))

        latest = await ledger_storage.get_latest_invoice()
        assert latest.invoice_number == "Invoice_Amit_FY25-26-1002"

        paid = await ledger_storage.list_invoices(status=InvoiceStatus.PAID)
        assert [i.id for i in paid] == [first.id]

        newest_first = await ledger_storage.list_invoices()
        assert [i.id for i in newest_first] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_update_missing_invoice(self, ledger_storage):
        with pytest.raises(NotFoundError):
            await ledger_storage.update_invoice(_invoice("Invoice_Amit_FY25-26-1001"))


class TestAuditStorage:
    """Append-only audit log."""

    @pytest.mark.asyncio
    async def test_recent_events_newest_first(self, audit_storage):
        for event_type in (AuditEventType.EXPENSE_RECORDED, AuditEventType.PAYMENT_RECORDED):
            await audit_storage.append_event(AuditEvent(event_type=event_type, description="x"))
        events = await audit_storage.get_recent_events(limit=1)
        assert [e.event_type for e in events] == [AuditEventType.PAYMENT_RECORDED]
