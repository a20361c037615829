"""
Two-Stage Record Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Raw form data is parsed into the input models
- Types, required fields, ranges and the resource pair are enforced
- Every pydantic error becomes one ValidationIssue

STAGE 2 - SEMANTIC VALIDATION:
- Future-dated records beyond the configured tolerance
- Zero hours, zero amounts and zero conversion rates
- Invoice dates that precede the period they bill

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues.
The one thing it fills in is a missing hourly rate, which takes the
configured default.
"""

from datetime import date, timedelta
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from splitledger.config import AppSettings, get_settings
from splitledger.models.inputs import (
    ExpenseInput,
    InvoiceRequest,
    PaymentInput,
    TimesheetInput,
    ValidationIssue,
    ValidationResult,
)


FormT = TypeVar("FormT", bound=BaseModel)


class RecordValidator:
    """
    Validates submitted ledger records through a two-stage pipeline.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app

    # -------------------------------------------------------------------------
    # Stage 1
    # -------------------------------------------------------------------------

    def _validate_schema(
        self,
        form: type[FormT],
        data: dict[str, Any],
    ) -> tuple[Optional[FormT], list[ValidationIssue]]:
        """
        Stage 1: Parse raw data into the input form.

        Returns: (parsed_form_or_None, list_of_issues)
        """
        try:
            return form.model_validate(data), []
        except ValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "record",
                    issue_type=error["type"],
                    message=error["msg"],
                    severity="error",
                )
                for error in e.errors()
            ]
            return None, issues

    # -------------------------------------------------------------------------
    # Stage 2
    # -------------------------------------------------------------------------

    def _check_future_date(
        self,
        field: str,
        value: date,
        today: date,
    ) -> list[ValidationIssue]:
        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if value > max_future_date:
            return [ValidationIssue(
                field=field,
                issue_type="future_date",
                message=f"Date ({value}) is too far in the future",
                severity="error",
                suggested_fix="Please verify the date is correct",
            )]
        return []

    def _semantic_timesheet(self, form: TimesheetInput, today: date) -> list[ValidationIssue]:
        issues = self._check_future_date("date", form.date, today)
        if form.hours_worked == 0:
            issues.append(ValidationIssue(
                field="hours_worked",
                issue_type="zero_value",
                message="Timesheet entry has zero hours",
                severity="warning",
            ))
        if form.hourly_rate == 0:
            issues.append(ValidationIssue(
                field="hourly_rate",
                issue_type="zero_value",
                message="Hourly rate is zero; these hours will earn nothing",
                severity="warning",
            ))
        return issues

    def _semantic_expense(self, form: ExpenseInput, today: date) -> list[ValidationIssue]:
        issues = self._check_future_date("date", form.date, today)
        if form.amount_inr == 0:
            issues.append(ValidationIssue(
                field="amount_inr",
                issue_type="zero_value",
                message="Expense amount is zero",
                severity="warning",
            ))
        return issues

    def _semantic_payment(self, form: PaymentInput, today: date) -> list[ValidationIssue]:
        issues = self._check_future_date("payment_date", form.payment_date, today)
        if form.conversion_rate == 0 and form.amount_usd_received > 0:
            issues.append(ValidationIssue(
                field="conversion_rate",
                issue_type="zero_value",
                message="Conversion rate is zero, so no INR will be recorded as received",
                severity="warning",
                suggested_fix="Enter the rate shown on the bank advice",
            ))
        return issues

    def _semantic_invoice(self, form: InvoiceRequest, today: date) -> list[ValidationIssue]:
        issues = self._check_future_date("invoice_date", form.invoice_date, today)
        if form.invoice_date < form.billing_period_end:
            issues.append(ValidationIssue(
                field="invoice_date",
                issue_type="inconsistent",
                message="Invoice is dated before its billing period ends",
                severity="warning",
            ))
        if len(set(form.resources)) != len(form.resources):
            issues.append(ValidationIssue(
                field="resources",
                issue_type="duplicate",
                message="A resource is selected more than once",
                severity="error",
            ))
        return issues

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _run(
        self,
        record_type: str,
        form: type[FormT],
        data: dict[str, Any],
        semantic,
        today: Optional[date],
    ) -> tuple[Optional[FormT], ValidationResult]:
        parsed, issues = self._validate_schema(form, data)
        schema_valid = parsed is not None

        semantic_valid = False
        if parsed is not None:
            semantic_issues = semantic(parsed, today or date.today())
            issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        result = ValidationResult(
            record_type=record_type,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=issues,
        )
        return (parsed if result.is_valid else None), result

    def validate_timesheet(
        self,
        data: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Optional[TimesheetInput], ValidationResult]:
        """
        Validate a submitted timesheet entry.

        A missing hourly rate takes the configured billing default.

        Returns:
            (parsed form or None when invalid, validation result)
        """
        data = dict(data)
        if data.get("hourly_rate") is None:
            data["hourly_rate"] = get_settings().billing.default_hourly_rate_usd
        return self._run("timesheet", TimesheetInput, data, self._semantic_timesheet, today)

    def validate_expense(
        self,
        data: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Optional[ExpenseInput], ValidationResult]:
        return self._run("expense", ExpenseInput, data, self._semantic_expense, today)

    def validate_payment(
        self,
        data: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Optional[PaymentInput], ValidationResult]:
        return self._run("payment", PaymentInput, data, self._semantic_payment, today)

    def validate_invoice_request(
        self,
        data: dict[str, Any],
        today: Optional[date] = None,
    ) -> tuple[Optional[InvoiceRequest], ValidationResult]:
        return self._run("invoice", InvoiceRequest, data, self._semantic_invoice, today)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Summarize validation results for display next to the form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.field}: {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
