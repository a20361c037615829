"""
Ledger Record Models

These models describe the rows the storage layer hands to the calculations:
timesheets, client payments, shared expenses and invoices.

DESIGN DECISION: Resource names on stored rows are kept as plain strings.
The closed Resource enumeration is applied when a row is interpreted, so a
row carrying a name outside the pair still loads and is simply left out of
per-resource totals.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Resource(str, Enum):
    """
    The two partners who bill hours and share expenses.

    DESIGN DECISION: Exactly two members. The equal expense split and the
    "who owes whom" pairing are both expressed through `other`, so adding a
    third member means revisiting those rules, not just this enum.
    """
    AMIT = "Amit"
    ABHILASH = "Abhilash"

    @property
    def other(self) -> "Resource":
        """The counterpart in the pair."""
        return Resource.ABHILASH if self is Resource.AMIT else Resource.AMIT

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["Resource"]:
        """Resolve a stored name, returning None for anyone outside the pair."""
        if name is None:
            return None
        try:
            return cls(name.strip())
        except ValueError:
            return None


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""
    DRAFT = "Draft"
    GENERATED = "Generated"
    PAID = "Paid"


# =============================================================================
# RECORDS
# =============================================================================

class TimesheetEntry(BaseModel):
    """Hours one resource worked on a given day, billed in USD."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    date: date
    resource_name: str = Field(
        ...,
        min_length=1,
        description="Resource who did the work"
    )
    hours_worked: Decimal = Field(..., ge=0)
    hourly_rate: Decimal = Field(
        default=Decimal("45.00"),
        ge=0,
        description="Hourly rate in USD"
    )
    project_name: Optional[str] = Field(default=None, max_length=255)
    client_name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def resource(self) -> Optional[Resource]:
        return Resource.from_name(self.resource_name)

    @property
    def amount_usd(self) -> Decimal:
        return self.hours_worked * self.hourly_rate


class Payment(BaseModel):
    """
    A client payment: USD invoiced, converted and received in INR.

    amount_inr_received is net of bank charges.
    """

    id: UUID = Field(default_factory=uuid4)
    invoice_id: Optional[UUID] = None
    payment_date: date
    amount_usd_invoiced: Decimal = Field(..., ge=0)
    bank_charges_usd: Decimal = Field(default=Decimal("0"), ge=0)
    amount_usd_received: Decimal = Field(..., ge=0)
    conversion_rate: Decimal = Field(..., ge=0, description="INR per USD")
    amount_inr_received: Decimal = Field(..., ge=0)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Expense(BaseModel):
    """A shared business cost paid by one resource on behalf of both."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    date: date
    description: str = Field(..., min_length=1, max_length=255)
    amount_inr: Decimal = Field(..., ge=0)
    paid_by: str = Field(..., min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    is_reimbursed: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def payer(self) -> Optional[Resource]:
        return Resource.from_name(self.paid_by)


class InvoiceLineItem(BaseModel):
    """One billed timesheet entry on an invoice."""

    date: date
    resource_name: str
    description: str
    hours_worked: Decimal = Field(..., ge=0)
    rate_per_hour: Decimal = Field(..., ge=0)
    amount_usd: Decimal = Field(..., ge=0)


class Invoice(BaseModel):
    """
    A client invoice built from the timesheets of a billing period.

    The INR total uses the conversion rate chosen when the invoice was
    raised; the rate actually realised is recorded on the Payment.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    invoice_number: str = Field(..., min_length=1, max_length=100)
    invoice_date: date
    billing_period_start: date
    billing_period_end: date
    client_name: str = Field(..., min_length=1, max_length=255)
    client_address: Optional[str] = None
    resources: list[Resource] = Field(..., min_length=1)
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    subtotal_usd: Decimal = Field(..., ge=0)
    conversion_rate: Decimal = Field(default=Decimal("90"), ge=0)
    total_inr: Decimal = Field(..., ge=0)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    paid_date: Optional[date] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @model_validator(mode='after')
    def validate_dates(self) -> 'Invoice':
        """Validate date relationships."""
        if self.billing_period_end < self.billing_period_start:
            raise ValueError("Billing period end cannot be before start")

        if self.paid_date and self.paid_date < self.invoice_date:
            raise ValueError("Paid date cannot be before invoice date")

        return self


class ReportPeriod(BaseModel):
    """Inclusive date window a report covers. Open bounds mean "all time"."""
    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    @model_validator(mode='after')
    def validate_bounds(self) -> 'ReportPeriod':
        if self.start and self.end and self.end < self.start:
            raise ValueError("Period end cannot be before start")
        return self

    @property
    def start_label(self) -> str:
        return self.start.isoformat() if self.start else "All time"

    @property
    def end_label(self) -> str:
        return self.end.isoformat() if self.end else "All time"

    @property
    def label(self) -> str:
        if self.start is None and self.end is None:
            return "All time"
        return f"{self.start_label} to {self.end_label}"

    def contains(self, day: date) -> bool:
        """True when day falls inside the window (bounds inclusive)."""
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        return True
