"""Startup loading of the blob store, with one-shot upgrade from the single-debt layout"""

import logging
import uuid
from typing import List, Tuple
from pydantic import ValidationError as RecordValidationError
from debt_tracker.config import Settings
from debt_tracker.domain.exceptions import MigrationParseError, StorageError
from debt_tracker.domain.models import Debt, Payment
from debt_tracker.infrastructure.database.repositories import BlobStore
from debt_tracker.infrastructure.observability.metrics import migration_counter, persistence_failures_counter
from debt_tracker.infrastructure.storage.records import (
    LegacySettingsRecord,
    legacy_payment_list_adapter,
    dump_debts,
    dump_payments,
    parse_debts,
    parse_payments,
)

logger = logging.getLogger(__name__)

Collections = Tuple[List[Debt], List[Payment]]


def load_collections(blob_store: BlobStore, settings: Settings) -> Collections:
    """
    Read debts and payments, migrating the legacy layout when needed.

    Order of precedence:
    1. Current debts key present: parse both current collections unchanged
    2. Legacy settings marked as set: synthesize one debt, re-tag legacy
       payments to it, write the current keys (legacy keys stay in place)
    3. Nothing usable: empty collections

    Never raises for bad data; parse failures degrade to empty collections.
    StorageError from the blob store itself propagates.
    """
    raw_debts = blob_store.get(settings.debts_key)
    if raw_debts is not None:
        return _load_current(raw_debts, blob_store.get(settings.payments_key))

    try:
        migrated = migrate_legacy(blob_store, settings)
    except MigrationParseError:
        logger.exception("Legacy migration failed, starting with an empty store")
        migration_counter.labels(outcome="failed").inc()
        return [], []

    if migrated is None:
        migration_counter.labels(outcome="empty").inc()
        return [], []

    debts, payments = migrated
    try:
        blob_store.set_many({settings.debts_key: dump_debts(debts), settings.payments_key: dump_payments(payments)})
    except StorageError:
        # Migrated data is still served; the next mutation retries the write
        logger.exception("Could not persist migrated collections")
        persistence_failures_counter.inc()
    migration_counter.labels(outcome="migrated").inc()
    logger.info(
        "Migrated legacy single-debt data",
        extra={"debt_id": debts[0].id, "payment_count": len(payments)},
    )
    return debts, payments


def migrate_legacy(blob_store: BlobStore, settings: Settings) -> Collections | None:
    """
    Build current-layout collections from the legacy blobs without writing them.

    Returns:
        (debts, payments) with exactly one debt, or None when there is no
        configured legacy debt

    Raises:
        MigrationParseError: When a legacy blob is malformed
    """
    raw_settings = blob_store.get(settings.legacy_settings_key)
    if raw_settings is None:
        return None

    try:
        legacy = LegacySettingsRecord.model_validate_json(raw_settings)
        if not legacy.is_set:
            return None

        debt = legacy.to_debt(str(uuid.uuid4()))

        raw_payments = blob_store.get(settings.legacy_payments_key)
        legacy_payments = legacy_payment_list_adapter.validate_json(raw_payments) if raw_payments else []
    except (RecordValidationError, ValueError) as e:
        raise MigrationParseError(f"Unreadable legacy data: {e}") from e

    payments = [p.to_payment(debt.id) for p in legacy_payments]
    return [debt], payments


def _load_current(raw_debts: str, raw_payments: str | None) -> Collections:
    try:
        debts = parse_debts(raw_debts)
        payments = parse_payments(raw_payments) if raw_payments is not None else []
    except RecordValidationError:
        # Stored blobs are left as they are until the next mutation overwrites them
        logger.exception("Stored collections are unreadable, starting with an empty store")
        migration_counter.labels(outcome="corrupt").inc()
        return [], []

    debt_ids = {d.id for d in debts}
    orphans = [p.id for p in payments if p.debt_id not in debt_ids]
    if orphans:
        logger.warning("Loaded payments reference unknown debts", extra={"payment_ids": orphans})

    migration_counter.labels(outcome="current").inc()
    return debts, payments
