"""Unit tests for the report snapshot and ticket rendering"""

from datetime import date, datetime, timezone
from decimal import Decimal
from debt_tracker.domain.models import Payment
from debt_tracker.domain.report import build_report, format_currency_es, render_ticket, ticket_filename

GENERATED_AT = datetime(2024, 6, 15, 21, 5, tzinfo=timezone.utc)


def test_build_report_figures(debt, sample_payments):
    report = build_report(debt, sample_payments, generated_at=GENERATED_AT)

    assert report.creditor_name == "Ana"
    assert report.total_amount == 1000
    assert report.total_paid == 500
    assert report.remaining == 500
    assert report.progress_percentage == 50
    assert [p.id for p in report.recent_payments] == ["p1", "p2"]


def test_build_report_keeps_five_newest(debt):
    payments = [
        Payment(id=f"p{i}", debt_id=debt.id, date=date(2024, 1, 10 + i), amount=Decimal("1"))
        for i in range(8)
    ]

    report = build_report(debt, payments, generated_at=GENERATED_AT)

    assert [p.id for p in report.recent_payments] == ["p7", "p6", "p5", "p4", "p3"]


def test_format_currency_es():
    assert format_currency_es(Decimal("1234.5")) == "1.234,50 €"
    assert format_currency_es(Decimal("0")) == "0,00 €"
    assert format_currency_es(Decimal("1000000.005")) == "1.000.000,01 €"


def test_render_ticket(debt, sample_payments):
    ticket = render_ticket(build_report(debt, sample_payments, generated_at=GENERATED_AT))

    assert "DEBT PAYMENT RECEIPT" in ticket
    assert "15 jun 2024" in ticket
    assert "09:05 PM" in ticket
    assert "- 500,00 €" in ticket
    assert "1 mar 2024 March" in ticket
    assert ticket.index("1 mar 2024") < ticket.index("1 feb 2024")


def test_render_ticket_without_payments(debt):
    ticket = render_ticket(build_report(debt, [], generated_at=GENERATED_AT))

    assert "No payments recorded" in ticket
    assert "0%" in ticket


def test_ticket_filename(debt):
    debt.creditor_name = "Banco  del Sur"

    assert ticket_filename(build_report(debt, [], generated_at=GENERATED_AT)) == "ticket_Banco_del_Sur_2024-06-15.txt"
