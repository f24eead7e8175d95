"""Key/value blob stores: SQL-backed for real runs, in-memory for tests"""

from typing import Dict, Optional, Protocol
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from debt_tracker.domain.exceptions import StorageError
from debt_tracker.infrastructure.database.models import BlobEntry


class BlobStore(Protocol):
    """Get/set access to serialized collections keyed by string"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def set_many(self, values: Dict[str, str]) -> None:
        """Write every key or none of them"""
        ...


class InMemoryBlobStore:
    """Dict-backed blob store"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def set_many(self, values: Dict[str, str]) -> None:
        self.data.update(values)


class SqlBlobStore:
    """Blob store persisted in the blob_entry table, one short session per call"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under key.

        Raises:
            StorageError: On any database failure
        """
        try:
            with self.session_factory() as db:
                entry = db.get(BlobEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read blob {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """
        Insert or replace the value stored under key.

        Raises:
            StorageError: On any database failure
        """
        self.set_many({key: value})

    def set_many(self, values: Dict[str, str]) -> None:
        """
        Insert or replace several values in a single transaction.

        Raises:
            StorageError: On any database failure; nothing is written then
        """
        try:
            with self.session_factory() as db:
                for key, value in values.items():
                    entry = db.get(BlobEntry, key)
                    if entry is None:
                        db.add(BlobEntry(key=key, value=value))
                    else:
                        entry.value = value
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write blobs {sorted(values)!r}: {e}") from e
