"""
Input Forms and Validation Results

Records enter the ledger through these forms. They carry the field rules
(hours per day, non-negative amounts, a resource from the pair) that the
stored record models deliberately leave loose.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from splitledger.models.records import Resource


MAX_HOURS_PER_DAY = Decimal("24")


class TimesheetInput(BaseModel):
    """A timesheet entry as submitted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: date
    resource_name: Resource
    hours_worked: Decimal = Field(
        ...,
        ge=0,
        le=MAX_HOURS_PER_DAY,
        description="Hours must be between 0 and 24 per day"
    )
    hourly_rate: Decimal = Field(
        ...,
        ge=0,
        description="Hourly rate in USD"
    )
    project_name: Optional[str] = Field(default=None, max_length=255)
    client_name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None


class ExpenseInput(BaseModel):
    """A shared expense as submitted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    date: date
    description: str = Field(..., min_length=1, max_length=255)
    amount_inr: Decimal = Field(..., ge=0)
    paid_by: Resource
    category: Optional[str] = Field(default=None, max_length=100)


class PaymentInput(BaseModel):
    """
    A client payment as submitted.

    The received amounts are derived, not entered:
    USD received = USD invoiced - bank charges, INR = USD received * rate.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    invoice_id: Optional[UUID] = None
    payment_date: date
    amount_usd_invoiced: Decimal = Field(..., ge=0)
    bank_charges_usd: Decimal = Field(default=Decimal("0"), ge=0)
    conversion_rate: Decimal = Field(..., ge=0, description="INR per USD")
    notes: Optional[str] = None

    @model_validator(mode='after')
    def validate_bank_charges(self) -> 'PaymentInput':
        if self.bank_charges_usd > self.amount_usd_invoiced:
            raise ValueError("Bank charges cannot exceed the invoiced amount")
        return self

    @property
    def amount_usd_received(self) -> Decimal:
        return self.amount_usd_invoiced - self.bank_charges_usd

    @property
    def amount_inr_received(self) -> Decimal:
        return self.amount_usd_received * self.conversion_rate


class InvoiceRequest(BaseModel):
    """Parameters for raising an invoice over a billing period."""
    model_config = ConfigDict(str_strip_whitespace=True)

    invoice_date: date
    billing_period_start: date
    billing_period_end: date
    client_name: str = Field(..., min_length=1, max_length=255)
    client_address: Optional[str] = None
    resources: list[Resource] = Field(
        ...,
        min_length=1,
        description="Select at least one resource"
    )
    conversion_rate: Decimal = Field(default=Decimal("90"), ge=0)

    @model_validator(mode='after')
    def validate_period(self) -> 'InvoiceRequest':
        if self.billing_period_end < self.billing_period_start:
            raise ValueError("Billing period end cannot be before start")
        return self


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields, ranges)
    Stage 2: Semantic validation (dates, consistency checks)
    """

    validation_id: UUID = Field(default_factory=uuid4)
    record_type: str = Field(
        ...,
        description="Kind of record validated (timesheet, expense, payment, invoice)"
    )
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
