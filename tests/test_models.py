"""
Tests for Split Ledger

Test strategy:
1. Unit tests for individual components (models, calculations, validator)
2. Flow tests against in-memory storage
3. No external services in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from splitledger.models.records import (
    Expense,
    Invoice,
    InvoiceStatus,
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
from splitledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestResource:
    """Tests for the two-party resource enum."""

    def test_exactly_two_resources(self):
        """The pair is closed."""
        assert [r.value for r in Resource] == ["Amit", "Abhilash"]

    def test_other(self):
        """Each resource's counterpart is the other one."""
        assert Resource.AMIT.other is Resource.ABHILASH
        assert Resource.ABHILASH.other is Resource.AMIT

    def test_from_name(self):
        """Known names resolve, unknown names give None."""
        assert Resource.from_name("Amit") is Resource.AMIT
        assert Resource.from_name("  Abhilash ") is Resource.ABHILASH
        assert Resource.from_name("Priya") is None
        assert Resource.from_name(None) is None


class TestRecordModels:
    """Tests for stored record models."""

    def test_timesheet_entry_creation(self):
        """Test TimesheetEntry model creation."""
        entry = TimesheetEntry(
            date=date(2025, 1, 6),
            resource_name="Amit",
            hours_worked=Decimal("7.5"),
            hourly_rate=Decimal("45.00"),
        )
        assert entry.resource is Resource.AMIT
        assert entry.amount_usd == Decimal("337.500")

    def test_timesheet_default_rate(self):
        """Hourly rate defaults to $45."""
        entry = TimesheetEntry(
            date=date(2025, 1, 6),
            resource_name="Abhilash",
            hours_worked=Decimal("1"),
        )
        assert entry.hourly_rate == Decimal("45.00")

    def test_timesheet_unknown_resource_loads(self):
        """Unknown names are stored, just not resolved."""
        entry = TimesheetEntry(
            date=date(2025, 1, 6),
            resource_name="Priya",
            hours_worked=Decimal("1"),
        )
        assert entry.resource is None

    def test_timesheet_rejects_negative_hours(self):
        """Test that negative hours are rejected."""
        with pytest.raises(ValueError):
            TimesheetEntry(
                date=date(2025, 1, 6),
                resource_name="Amit",
                hours_worked=Decimal("-1"),
            )

    def test_expense_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        expense = Expense(
            date=date(2025, 1, 6),
            description="  Coworking desk  ",
            amount_inr=Decimal("6000"),
            paid_by="Abhilash",
        )
        assert expense.description == "Coworking desk"
        assert expense.payer is Resource.ABHILASH
        assert expense.is_reimbursed is False

    def test_invoice_billing_period_validation(self):
        """Test billing period end cannot be before start."""
        with pytest.raises(ValueError, match="Billing period end cannot be before start"):
            Invoice(
                invoice_number="Invoice_Amit_FY25-26-1001",
                invoice_date=date(2025, 2, 1),
                billing_period_start=date(2025, 1, 31),
                billing_period_end=date(2025, 1, 1),
                client_name="Acme",
                resources=[Resource.AMIT],
                subtotal_usd=Decimal("100"),
                total_inr=Decimal("9000"),
            )

    def test_invoice_paid_date_validation(self):
        """Test that paid_date cannot be before invoice_date."""
        with pytest.raises(ValueError, match="Paid date cannot be before invoice date"):
            Invoice(
                invoice_number="Invoice_Amit_FY25-26-1001",
                invoice_date=date(2025, 2, 1),
                billing_period_start=date(2025, 1, 1),
                billing_period_end=date(2025, 1, 31),
                client_name="Acme",
                resources=[Resource.AMIT],
                subtotal_usd=Decimal("100"),
                total_inr=Decimal("9000"),
                paid_date=date(2025, 1, 15),
            )

    def test_invoice_defaults(self):
        invoice = Invoice(
            invoice_number="Invoice_Amit_FY25-26-1001",
            invoice_date=date(2025, 2, 1),
            billing_period_start=date(2025, 1, 1),
            billing_period_end=date(2025, 1, 31),
            client_name="Acme",
            resources=["Amit"],
            subtotal_usd=Decimal("100"),
            total_inr=Decimal("9000"),
        )
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.resources == [Resource.AMIT]
        assert invoice.conversion_rate == Decimal("90")


class TestReportPeriod:
    """Tests for the report window."""

    def test_open_period_label(self):
        assert ReportPeriod().label == "All time"

    def test_bounded_period_label(self):
        period = ReportPeriod(start=date(2025, 1, 1), end=date(2025, 1, 31))
        assert period.label == "2025-01-01 to 2025-01-31"

    def test_half_open_period(self):
        period = ReportPeriod(start=date(2025, 1, 1))
        assert period.end_label == "All time"
        assert period.contains(date(2030, 1, 1))
        assert not period.contains(date(2024, 12, 31))

    def test_bounds_are_inclusive(self):
        period = ReportPeriod(start=date(2025, 1, 1), end=date(2025, 1, 31))
        assert period.contains(date(2025, 1, 1))
        assert period.contains(date(2025, 1, 31))

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError, match="Period end cannot be before start"):
            ReportPeriod(start=date(2025, 2, 1), end=date(2025, 1, 1))


class TestInputModels:
    """Tests for submitted forms."""

    def test_timesheet_input_hours_cap(self):
        """No more than 24 hours in a day."""
        with pytest.raises(ValueError):
            TimesheetInput(
                date=date(2025, 1, 6),
                resource_name="Amit",
                hours_worked=Decimal("24.5"),
                hourly_rate=Decimal("45"),
            )

    def test_timesheet_input_rejects_unknown_resource(self):
        with pytest.raises(ValueError):
            TimesheetInput(
                date=date(2025, 1, 6),
                resource_name="Priya",
                hours_worked=Decimal("8"),
                hourly_rate=Decimal("45"),
            )

    def test_expense_input_requires_description(self):
        with pytest.raises(ValueError):
            ExpenseInput(
                date=date(2025, 1, 6),
                description="   ",
                amount_inr=Decimal("100"),
                paid_by="Amit",
            )

    def test_payment_input_derived_amounts(self):
        """Received amounts are net of bank charges."""
        payment = PaymentInput(
            payment_date=date(2025, 2, 10),
            amount_usd_invoiced=Decimal("1000"),
            bank_charges_usd=Decimal("25"),
            conversion_rate=Decimal("86.5"),
        )
        assert payment.amount_usd_received == Decimal("975")
        assert payment.amount_inr_received == Decimal("84337.5")

    def test_payment_input_bank_charges_cap(self):
        with pytest.raises(ValueError, match="Bank charges cannot exceed"):
            PaymentInput(
                payment_date=date(2025, 2, 10),
                amount_usd_invoiced=Decimal("10"),
                bank_charges_usd=Decimal("25"),
                conversion_rate=Decimal("86.5"),
            )

    def test_invoice_request_needs_a_resource(self):
        with pytest.raises(ValueError):
            InvoiceRequest(
                invoice_date=date(2025, 2, 1),
                billing_period_start=date(2025, 1, 1),
                billing_period_end=date(2025, 1, 31),
                client_name="Acme",
                resources=[],
            )


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            record_type="timesheet",
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="hours_worked",
                    issue_type="missing",
                    message="Hours are required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_valid is False

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            record_type="expense",
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="amount_inr",
                    issue_type="zero_value",
                    message="Expense amount is zero",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.is_valid is True
        assert result.warnings == ["Expense amount is zero"]


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_RECORDED,
            description="Expense recorded",
        )
        assert event.event_type == AuditEventType.EXPENSE_RECORDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.INVOICE_CREATED,
            description="Invoice created",
            details={"invoice_number": "Invoice_Amit_FY25-26-1001"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "invoice_created"
        assert log_dict["details"]["invoice_number"] == "Invoice_Amit_FY25-26-1001"

    def test_builder_invoice_created(self):
        """Test AuditEventBuilder.invoice_created."""
        invoice_id = uuid4()
        correlation_id = uuid4()

        event = AuditEventBuilder.invoice_created(
            invoice_id=invoice_id,
            invoice_number="Invoice_Amit_FY25-26-1001",
            subtotal_usd="500",
            line_count=3,
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.INVOICE_CREATED
        assert event.entity_id == invoice_id
        assert event.correlation_id == correlation_id
        assert event.details["line_count"] == 3

    def test_builder_distribution_default_rate_warns(self):
        """Falling back to the default rate is flagged."""
        event = AuditEventBuilder.distribution_calculated(
            period_label="All time",
            avg_conversion_rate="90",
            net_total="0",
            used_default_rate=True,
            correlation_id=uuid4(),
        )
        assert event.severity == AuditSeverity.WARNING

    def test_builder_record_deleted(self):
        event = AuditEventBuilder.record_deleted("expense", uuid4(), uuid4())
        assert event.event_type == AuditEventType.EXPENSE_DELETED


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
