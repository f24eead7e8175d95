"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from debt_tracker.domain.models import BalancePoint, DebtSummary, DeletionPlan, Payment
from debt_tracker.domain.report import DebtReport

# Amounts go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CreateDebtRequest(BaseModel):
    """Request body for POST /v1/debts"""

    creditor_name: str = Field(..., description="Who the money is owed to")
    total_amount: Decimal = Field(..., description="Total amount owed")


class EditDebtTotalRequest(BaseModel):
    """Request body for PATCH /v1/debts/{debt_id}"""

    total_amount: Decimal


class AddPaymentRequest(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/payments"""

    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal
    payment_date: Optional[date] = Field(default=None, alias="date", description="Payment date, defaults to today")
    note: str = ""


class SelectionRequest(BaseModel):
    """Request body for PUT /v1/selection"""

    debt_id: Optional[str] = None


class PaymentSchema(BaseModel):
    id: str
    debt_id: str
    date: date
    amount: Money
    note: str

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentSchema":
        return cls(
            id=payment.id,
            debt_id=payment.debt_id,
            date=payment.date,
            amount=payment.amount,
            note=payment.note,
        )


class BalancePointSchema(BaseModel):
    date: date
    balance: Money
    paid: Money

    @classmethod
    def from_domain(cls, point: BalancePoint) -> "BalancePointSchema":
        return cls(date=point.date, balance=point.balance, paid=point.paid)


class DebtSummarySchema(BaseModel):
    """One dashboard card"""

    id: str
    creditor_name: str
    total_amount: Money
    start_date: datetime
    total_paid: Money
    remaining: Money
    progress_percentage: Money
    payment_count: int

    @classmethod
    def from_domain(cls, summary: DebtSummary) -> "DebtSummarySchema":
        return cls(
            id=summary.debt.id,
            creditor_name=summary.debt.creditor_name,
            total_amount=summary.debt.total_amount,
            start_date=summary.debt.start_date,
            total_paid=summary.total_paid,
            remaining=summary.remaining,
            progress_percentage=summary.progress_percentage,
            payment_count=summary.payment_count,
        )


class DashboardResponse(BaseModel):
    """Response for GET /v1/debts"""

    count: int
    debts: List[DebtSummarySchema]


class DebtDetailResponse(BaseModel):
    """Response for GET /v1/debts/{debt_id}"""

    summary: DebtSummarySchema
    payments: List[PaymentSchema]
    history: List[BalancePointSchema]


class HistoryResponse(BaseModel):
    """Response for GET /v1/debts/{debt_id}/history"""

    debt_id: str
    points: List[BalancePointSchema]


class DeletionPlanResponse(BaseModel):
    target_id: str
    description: str
    cascaded_payment_ids: List[str]

    @classmethod
    def from_domain(cls, plan: DeletionPlan) -> "DeletionPlanResponse":
        return cls(
            target_id=plan.target_id,
            description=plan.description,
            cascaded_payment_ids=list(plan.cascaded_payment_ids),
        )


class SelectionResponse(BaseModel):
    debt_id: Optional[str] = None


class AnalysisResponse(BaseModel):
    """Cached or freshly computed advisory result"""

    debt_id: str
    message: str
    tone: str
    estimated_completion: Optional[str] = None


class ReportResponse(BaseModel):
    """Response for GET /v1/debts/{debt_id}/report"""

    debt_id: str
    creditor_name: str
    total_amount: Money
    total_paid: Money
    remaining: Money
    progress_percentage: Money
    recent_payments: List[PaymentSchema]
    generated_at: datetime

    @classmethod
    def from_domain(cls, report: DebtReport) -> "ReportResponse":
        return cls(
            debt_id=report.debt_id,
            creditor_name=report.creditor_name,
            total_amount=report.total_amount,
            total_paid=report.total_paid,
            remaining=report.remaining,
            progress_percentage=report.progress_percentage,
            recent_payments=[PaymentSchema.from_domain(p) for p in report.recent_payments],
            generated_at=report.generated_at,
        )
