"""Payoff report snapshot and its plain-text ticket rendering"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from debt_tracker.domain import derivation
from debt_tracker.domain.models import Debt, Payment
from debt_tracker.utils.date_utils import format_date_es, format_time_es, utc_now

TICKET_WIDTH = 40


@dataclass
class DebtReport:
    """Everything the exported snapshot shows"""

    debt_id: str
    creditor_name: str
    total_amount: Decimal
    total_paid: Decimal
    remaining: Decimal
    progress_percentage: Decimal
    recent_payments: List[Payment]
    generated_at: datetime


def build_report(
    debt: Debt,
    payments: List[Payment],
    generated_at: Optional[datetime] = None,
    recent_limit: int = 5,
) -> DebtReport:
    summary = derivation.summarize(debt, payments)
    return DebtReport(
        debt_id=debt.id,
        creditor_name=debt.creditor_name,
        total_amount=debt.total_amount,
        total_paid=summary.total_paid,
        remaining=summary.remaining,
        progress_percentage=summary.progress_percentage,
        recent_payments=derivation.recent_payments(payments, debt.id, recent_limit),
        generated_at=generated_at or utc_now(),
    )


def format_currency_es(amount: Decimal) -> str:
    """es-ES euro formatting: 1.234,56 €"""
    quantized = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    grouped = f"{quantized:,.2f}"  # 1,234.56
    return grouped.replace(",", "_").replace(".", ",").replace("_", ".") + " €"


def _line(left: str, right: str) -> str:
    gap = max(1, TICKET_WIDTH - len(left) - len(right))
    return f"{left}{' ' * gap}{right}"


def render_ticket(report: DebtReport) -> str:
    """Render the report as a fixed-width receipt (es-ES amounts and dates)"""
    rule = "=" * TICKET_WIDTH
    lines = [
        rule,
        "DEBT PAYMENT RECEIPT".center(TICKET_WIDTH).rstrip(),
        rule,
        _line("Creditor", report.creditor_name),
        _line("Date", format_date_es(report.generated_at.date())),
        _line("Time", format_time_es(report.generated_at)),
        "-" * TICKET_WIDTH,
        _line("Total debt", format_currency_es(report.total_amount)),
        _line("Total paid", "- " + format_currency_es(report.total_paid)),
        _line("Remaining", format_currency_es(report.remaining)),
        _line("Progress", f"{report.progress_percentage:.0f}%"),
        "-" * TICKET_WIDTH,
        "Recent payments",
    ]

    if report.recent_payments:
        for payment in report.recent_payments:
            label = format_date_es(payment.date)
            if payment.note:
                label = f"{label} {payment.note}"
            lines.append(_line(label, format_currency_es(payment.amount)))
    else:
        lines.append("  No payments recorded")

    lines.append(rule)
    return "\n".join(lines) + "\n"


def ticket_filename(report: DebtReport) -> str:
    """ticket_<creditor with underscores>_<YYYY-MM-DD>.txt"""
    creditor = re.sub(r"\s+", "_", report.creditor_name)
    return f"ticket_{creditor}_{report.generated_at.date().isoformat()}.txt"
