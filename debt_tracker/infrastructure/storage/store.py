"""In-memory authoritative debt and payment collections backed by a blob store"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Dict, Iterator, List, Optional
from debt_tracker.config import Settings, settings as default_settings
from debt_tracker.domain.exceptions import NotFoundError, StorageError
from debt_tracker.domain.models import Debt, Payment
from debt_tracker.infrastructure.database.repositories import BlobStore
from debt_tracker.infrastructure.observability.metrics import persistence_failures_counter
from debt_tracker.infrastructure.storage.migration import load_collections
from debt_tracker.infrastructure.storage.records import dump_debts, dump_payments

logger = logging.getLogger(__name__)


class DebtStore:
    """
    Owner of the debt and payment collections.

    Both collections are insertion-ordered dicts keyed by id, which gives
    store order and O(1) lookup at once. Every completed mutation bumps
    `generation` and persists both collections.
    """

    def __init__(self, blob_store: BlobStore, settings: Settings | None = None):
        self.blob_store = blob_store
        self.settings = settings or default_settings
        self._debts: Dict[str, Debt] = {}
        self._payments: Dict[str, Payment] = {}
        self.generation = 0

    @property
    def debts(self) -> List[Debt]:
        return list(self._debts.values())

    @property
    def payments(self) -> List[Payment]:
        return list(self._payments.values())

    def load(self) -> None:
        """Replace in-memory state with what the blob store holds (migrating if needed)"""
        debts, payments = load_collections(self.blob_store, self.settings)
        self._debts = {d.id: d for d in debts}
        self._payments = {p.id: p for p in payments}
        self.generation = 0
        logger.info("Store loaded", extra={"debt_count": len(self._debts), "payment_count": len(self._payments)})

    def save(self) -> bool:
        """
        Write both collections, empty ones included.

        An explicit empty list tells the next load that the user cleared
        everything, as opposed to a store that was never initialized.

        Returns:
            False when the blob store rejected the write (memory stays authoritative)
        """
        try:
            self.blob_store.set_many(
                {
                    self.settings.debts_key: dump_debts(self.debts),
                    self.settings.payments_key: dump_payments(self.payments),
                }
            )
        except StorageError:
            persistence_failures_counter.inc()
            logger.exception("Failed to persist collections")
            return False
        return True

    @contextmanager
    def mutate(self) -> Iterator["DebtStore"]:
        """Wrap a mutation: on success bump the generation and persist"""
        yield self
        self.generation += 1
        self.save()

    # Lookups

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return self._debts.get(debt_id)

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self._payments.get(payment_id)

    def require_debt(self, debt_id: str) -> Debt:
        debt = self._debts.get(debt_id)
        if debt is None:
            raise NotFoundError(f"Debt {debt_id} not found")
        return debt

    def require_payment(self, payment_id: str) -> Payment:
        payment = self._payments.get(payment_id)
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    # Raw mutators; callers validate and run them inside mutate()

    def append_debt(self, debt: Debt) -> None:
        if debt.id in self._debts:
            raise ValueError(f"Duplicate debt id {debt.id}")
        self._debts[debt.id] = debt

    def append_payment(self, payment: Payment) -> None:
        if payment.id in self._payments:
            raise ValueError(f"Duplicate payment id {payment.id}")
        if payment.debt_id not in self._debts:
            raise NotFoundError(f"Debt {payment.debt_id} not found")
        self._payments[payment.id] = payment

    def remove_debt(self, debt_id: str) -> List[Payment]:
        """Remove a debt and all its payments in one step; returns the removed payments"""
        debt = self.require_debt(debt_id)
        kept = {pid: p for pid, p in self._payments.items() if p.debt_id != debt.id}
        removed = [p for p in self._payments.values() if p.debt_id == debt.id]

        debts = dict(self._debts)
        del debts[debt.id]
        self._debts, self._payments = debts, kept
        return removed

    def remove_payment(self, payment_id: str) -> Payment:
        payment = self.require_payment(payment_id)
        del self._payments[payment_id]
        return payment

    def set_debt_total(self, debt_id: str, total_amount: Decimal) -> Debt:
        debt = self.require_debt(debt_id)
        debt.total_amount = total_amount
        return debt
