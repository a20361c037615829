"""
Distribution Report Models

A DistributionReport is a snapshot of how a period's revenue and shared
expenses settle between the two resources. It is never persisted; callers
recompute it whenever they need it.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from splitledger.models.records import ReportPeriod, Resource


ZERO = Decimal("0")


class ResourceDistribution(BaseModel):
    """Earnings, expense share and net withdrawal of one resource."""
    model_config = ConfigDict(frozen=True)

    resource: Resource

    # Timesheets
    hours: Decimal = ZERO
    earnings_usd: Decimal = ZERO
    earnings_inr: Decimal = ZERO
    effective_rate_usd: Decimal = Field(
        default=ZERO,
        description="earnings_usd / hours, 0 when no hours were logged"
    )
    effective_rate_inr: Decimal = Field(
        default=ZERO,
        description="earnings_inr / hours, 0 when no hours were logged"
    )

    # Expenses
    expense_count: int = 0
    expenses_paid: Decimal = ZERO
    liability: Decimal = ZERO
    reimbursement: Decimal = Field(
        default=ZERO,
        description="Positive: owed money. Negative: owes the other resource."
    )

    # Settlement
    net_withdrawal: Decimal = ZERO
    owes_other: Decimal = ZERO


class DistributionTotals(BaseModel):
    """Sums over both resources."""
    model_config = ConfigDict(frozen=True)

    hours: Decimal = ZERO
    earnings_usd: Decimal = ZERO
    earnings_inr: Decimal = ZERO
    expense_count: int = 0
    total_expenses: Decimal = ZERO
    equal_liability: Decimal = ZERO
    net_withdrawal: Decimal = ZERO


class PaymentSummary(BaseModel):
    """Client payments received in the period and the blended rate they imply."""
    model_config = ConfigDict(frozen=True)

    total_inr: Decimal = ZERO
    total_usd_invoiced: Decimal = ZERO
    avg_conversion_rate: Decimal
    payment_count: int = 0
    used_default_rate: bool = Field(
        default=False,
        description="True when no USD was invoiced and the default rate applied"
    )


class SettlementSummary(BaseModel):
    """Who pays whom to square the shared expenses."""
    model_config = ConfigDict(frozen=True)

    debtor: Resource
    creditor: Resource
    amount: Decimal


class DistributionReport(BaseModel):
    """
    Revenue distribution for one period.

    INVARIANT: every total equals the sum of the two per-resource values.
    """
    model_config = ConfigDict(frozen=True)

    period: ReportPeriod = Field(default_factory=ReportPeriod)
    resources: dict[Resource, ResourceDistribution]
    totals: DistributionTotals
    payments: PaymentSummary

    def resource(self, resource: Resource) -> ResourceDistribution:
        return self.resources[resource]

    def owed_by(self, resource: Resource) -> Decimal:
        """Amount resource owes the other one for shared expenses."""
        return self.resources[resource].owes_other

    @property
    def settlement(self) -> Optional[SettlementSummary]:
        """The single outstanding transfer, or None when both are square."""
        for resource, distribution in self.resources.items():
            if distribution.owes_other > 0:
                return SettlementSummary(
                    debtor=resource,
                    creditor=resource.other,
                    amount=distribution.owes_other,
                )
        return None

    def to_dict(self) -> dict[str, Any]:
        """
        Nested breakdown for export collaborators.

        Keys per resource are the lower-cased resource names. Amounts stay
        Decimal; converting them for a wire format is the caller's concern.
        """
        def key(resource: Resource) -> str:
            return resource.value.lower()

        ordered = list(Resource)

        return {
            "period": {
                "start_date": self.period.start_label,
                "end_date": self.period.end_label,
            },
            "timesheets": {
                **{
                    key(r): {
                        "hours": self.resources[r].hours,
                        "earnings_usd": self.resources[r].earnings_usd,
                        "earnings_inr": self.resources[r].earnings_inr,
                    }
                    for r in ordered
                },
                "total": {
                    "hours": self.totals.hours,
                    "earnings_usd": self.totals.earnings_usd,
                    "earnings_inr": self.totals.earnings_inr,
                },
            },
            "payments": {
                "total_payments_inr": self.payments.total_inr,
                "avg_conversion_rate": self.payments.avg_conversion_rate,
                "payment_count": self.payments.payment_count,
            },
            "expenses": {
                **{
                    key(r): {
                        "expense_count": self.resources[r].expense_count,
                        "total_paid": self.resources[r].expenses_paid,
                        "liability": self.resources[r].liability,
                        "reimbursement": self.resources[r].reimbursement,
                    }
                    for r in ordered
                },
                "total": {
                    "expense_count": self.totals.expense_count,
                    "total_expenses": self.totals.total_expenses,
                    "equal_liability": self.totals.equal_liability,
                },
            },
            "net_withdrawal": {
                **{key(r): self.resources[r].net_withdrawal for r in ordered},
                "total": self.totals.net_withdrawal,
            },
            "summary": {
                f"{key(r)}_owes_{key(r.other)}": self.resources[r].owes_other
                for r in ordered
            },
        }


# =============================================================================
# TIMESHEET SUMMARY
# =============================================================================

class ResourceHoursSummary(BaseModel):
    """Hours and billed amount for one resource name."""

    resource_name: str
    total_hours: Decimal = ZERO
    total_amount: Decimal = ZERO
    entry_count: int = 0


class TimesheetSummary(BaseModel):
    """Per-resource timesheet totals with a grand total across all rows."""

    by_resource: list[ResourceHoursSummary] = Field(default_factory=list)
    total_hours: Decimal = ZERO
    total_amount: Decimal = ZERO
    entry_count: int = 0
