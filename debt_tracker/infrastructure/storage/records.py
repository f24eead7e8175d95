"""Persisted record shapes for the blob store (current and legacy layouts)"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, List, Optional
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, TypeAdapter
from pydantic.alias_generators import to_camel
from debt_tracker.domain.models import Debt, Payment


def _float_as_text(value):
    # Decimal(0.1) would carry binary noise; go through the shortest repr instead
    if isinstance(value, float):
        return int(value) if value.is_integer() else repr(value)
    return value


# Amounts live as Decimal in memory and as plain JSON numbers on disk
Amount = Annotated[
    Decimal,
    BeforeValidator(_float_as_text),
    PlainSerializer(float, return_type=float, when_used="json"),
]


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DebtRecord(_Record):
    """Current-layout debt: {id, creditorName, totalAmount, startDate}"""

    id: str = Field(..., min_length=1)
    creditor_name: str
    total_amount: Amount = Field(..., gt=0)
    start_date: datetime

    @classmethod
    def from_domain(cls, debt: Debt) -> "DebtRecord":
        return cls(
            id=debt.id,
            creditor_name=debt.creditor_name,
            total_amount=debt.total_amount,
            start_date=debt.start_date,
        )

    def to_domain(self) -> Debt:
        return Debt(
            id=self.id,
            creditor_name=self.creditor_name,
            total_amount=self.total_amount,
            start_date=_as_utc(self.start_date),
        )


class PaymentRecord(_Record):
    """Current-layout payment: {id, debtId, date, amount, note}"""

    id: str = Field(..., min_length=1)
    debt_id: str
    date: date
    amount: Amount = Field(..., gt=0)
    note: str = ""

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentRecord":
        return cls(
            id=payment.id,
            debt_id=payment.debt_id,
            date=payment.date,
            amount=payment.amount,
            note=payment.note,
        )

    def to_domain(self) -> Payment:
        return Payment(
            id=self.id,
            debt_id=self.debt_id,
            date=self.date,
            amount=self.amount,
            note=self.note,
        )


class LegacySettingsRecord(_Record):
    """Single-debt configuration from the previous layout"""

    is_set: bool = False
    creditor_name: Optional[str] = None
    total_amount: Optional[Amount] = None
    start_date: Optional[datetime] = None

    def to_debt(self, debt_id: str) -> Debt:
        """
        Build the single debt this configuration described.

        Raises:
            ValueError: When a field needed for the debt is missing or not positive
        """
        if not self.creditor_name or self.total_amount is None or self.start_date is None:
            raise ValueError("legacy settings marked as set but incomplete")
        if self.total_amount <= 0:
            raise ValueError(f"legacy total amount must be positive, got {self.total_amount}")
        return Debt(
            id=debt_id,
            creditor_name=self.creditor_name,
            total_amount=self.total_amount,
            start_date=_as_utc(self.start_date),
        )


class LegacyPaymentRecord(_Record):
    """Previous-layout payment, not yet tied to a debt"""

    id: str = Field(..., min_length=1)
    date: date
    amount: Amount = Field(..., gt=0)
    note: str = ""

    def to_payment(self, debt_id: str) -> Payment:
        return Payment(id=self.id, debt_id=debt_id, date=self.date, amount=self.amount, note=self.note)


debt_list_adapter = TypeAdapter(List[DebtRecord])
payment_list_adapter = TypeAdapter(List[PaymentRecord])
legacy_payment_list_adapter = TypeAdapter(List[LegacyPaymentRecord])


def dump_debts(debts: List[Debt]) -> str:
    records = [DebtRecord.from_domain(d) for d in debts]
    return debt_list_adapter.dump_json(records, by_alias=True).decode("utf-8")


def dump_payments(payments: List[Payment]) -> str:
    records = [PaymentRecord.from_domain(p) for p in payments]
    return payment_list_adapter.dump_json(records, by_alias=True).decode("utf-8")


def parse_debts(raw: str) -> List[Debt]:
    """Raises pydantic.ValidationError on malformed input"""
    return [r.to_domain() for r in debt_list_adapter.validate_json(raw)]


def parse_payments(raw: str) -> List[Payment]:
    """Raises pydantic.ValidationError on malformed input"""
    return [r.to_domain() for r in payment_list_adapter.validate_json(raw)]
