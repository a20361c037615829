"""
Tests for presentation formatting and plain-text export.
"""

from datetime import date
from decimal import Decimal

import pytest

from splitledger.calculations import build_invoice, compute_distribution
from splitledger.models.inputs import InvoiceRequest
from splitledger.models.records import ReportPeriod, Resource
from splitledger.reports import (
    fiscal_year,
    format_currency,
    format_display_date,
    format_hours,
    month_range,
    parse_date_string,
    render_distribution,
    render_invoice,
    to_cents,
)

from factories import make_expense, make_payment, make_timesheet


class TestFormatting:
    """Currency, hours and dates."""

    def test_format_currency_usd(self):
        assert format_currency(Decimal("500")) == "$500.00"

    def test_format_currency_inr(self):
        assert format_currency(Decimal("45000"), "INR") == "₹45000.00"

    def test_format_currency_negative(self):
        assert format_currency(Decimal("-5000"), "INR") == "-₹5000.00"

    def test_format_currency_rounds_half_up(self):
        assert format_currency(Decimal("0.125")) == "$0.13"
        assert to_cents("2.675") == Decimal("2.68")

    def test_format_currency_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unsupported currency"):
            format_currency(Decimal("1"), "EUR")

    def test_format_hours(self):
        assert format_hours(Decimal("7.5")) == "7.50"
        assert format_hours("8") == "8.00"

    def test_display_date(self):
        assert format_display_date(date(2025, 1, 5)) == "Jan 05, 2025"

    def test_parse_date_string(self):
        assert parse_date_string("2025-03-31") == date(2025, 3, 31)

    def test_month_range(self):
        assert month_range(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_range(date(2025, 12, 31)) == (date(2025, 12, 1), date(2025, 12, 31))

    def test_fiscal_year(self):
        fy = fiscal_year(date(2025, 6, 1))
        assert fy.label == "FY25-26"
        assert fy.start == date(2025, 4, 1)
        assert fy.end == date(2026, 3, 31)


class TestTextExport:
    """Plain-text rendering."""

    def test_render_distribution(self):
        report = compute_distribution(
            [make_timesheet("Amit", "10", "50"), make_timesheet("Abhilash", "5", "50")],
            [make_payment("750", "67500")],
            [make_expense("Amit", "10000")],
            period=ReportPeriod(start=date(2025, 1, 1), end=date(2025, 1, 31)),
        )
        text = render_distribution(report)
        assert "Period: 2025-01-01 to 2025-01-31" in text
        assert "average rate: ₹90.00/$1" in text
        assert "₹45000.00" in text
        assert "₹12500.00" in text
        assert "Abhilash owes Amit ₹5000.00 for expense reimbursement." in text

    def test_render_distribution_default_rate_note(self):
        text = render_distribution(compute_distribution([], [], []))
        assert "default conversion rate applied" in text
        assert "nobody owes anything" in text

    def test_render_invoice(self):
        invoice = build_invoice(
            InvoiceRequest(
                invoice_date=date(2025, 2, 3),
                billing_period_start=date(2025, 1, 1),
                billing_period_end=date(2025, 1, 31),
                client_name="Acme Corp",
                client_address="1 Main St",
                resources=[Resource.AMIT],
            ),
            [make_timesheet("Amit", "8", "50", day=date(2025, 1, 10))],
            1001,
        )
        text = render_invoice(invoice)
        assert text.startswith("INVOICE Invoice_Amit_FY25-26-1001")
        assert "Bill to: Acme Corp" in text
        assert "1 Main St" in text
        assert "Subtotal: $400.00" in text
        assert "Total: ₹36000.00" in text
        assert "Status: Draft" in text
