"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

TONES = ("positive", "neutral", "concerned")


@dataclass
class Debt:
    """Obligation to a named creditor. Only total_amount may change after creation."""

    id: str
    creditor_name: str
    total_amount: Decimal
    start_date: datetime


@dataclass(frozen=True)
class Payment:
    """Partial repayment recorded against one debt"""

    id: str
    debt_id: str
    date: date
    amount: Decimal
    note: str = ""


@dataclass(frozen=True)
class BalancePoint:
    """One point of the balance-over-time series"""

    date: date
    balance: Decimal
    paid: Decimal


@dataclass
class DebtSummary:
    """Derived figures for a single debt (dashboard card)"""

    debt: Debt
    total_paid: Decimal
    remaining: Decimal
    progress_percentage: Decimal
    payment_count: int


@dataclass(frozen=True)
class AnalysisResult:
    """Advisory assessment of a debt. Transient, never persisted."""

    message: str
    tone: str = "neutral"  # positive | neutral | concerned
    estimated_completion: Optional[str] = None


@dataclass(frozen=True)
class DeletionPlan:
    """What a confirmed deletion would remove"""

    target_id: str
    description: str
    cascaded_payment_ids: List[str]
