from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from pymongo import ASCENDING
from pymongo.client_session import ClientSession
from pymongo.collection import Collection

from config import settings
from config.database import mongodb
from domain.models.country import Country


class CountryTransaction:
    """Handle for one store transaction; exactly one of commit/rollback runs."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session
        self._finished = False

    @property
    def active(self) -> bool:
        return not self._finished

    def commit(self) -> None:
        self._finish()
        self.session.commit_transaction()

    def rollback(self) -> None:
        self._finish()
        self.session.abort_transaction()

    def _finish(self) -> None:
        if self._finished:
            raise RuntimeError("Transaction already committed or rolled back")
        self._finished = True


class CountryRepository:
    """Repository for Country model with transactional CRUD operations."""

    def __init__(self, collection: Optional[Collection] = None, connection=None) -> None:
        self._connection = connection or mongodb
        self._collection = collection

    @property
    def collection(self) -> Collection:
        # Resolved on first use so importing the repository never connects.
        if self._collection is None:
            self._collection = self._connection.collection(settings.COUNTRIES_COLLECTION)
        return self._collection

    def ensure_indexes(self) -> None:
        """Create necessary indexes."""
        self.collection.create_index([("code", ASCENDING)], unique=True)

    def get(self, code: str) -> Optional[Country]:
        """Find a country by its code."""
        doc = self.collection.find_one({"code": code}, {"_id": 0})
        return Country.from_mongo(doc) if doc else None

    def list_all(self) -> List[Country]:
        """Return all countries in store order."""
        cursor = self.collection.find({}, {"_id": 0})
        return [Country.from_mongo(doc) for doc in cursor]

    def count(self) -> int:
        return self.collection.count_documents({})

    @contextmanager
    def begin_transaction(self) -> Iterator[CountryTransaction]:
        """
        Open a session-bound transaction.

        Leaving the block normally commits, unless the caller already
        committed or rolled back. An exception rolls back and propagates.
        The session is ended on every path.
        """
        session = self._connection.start_session()
        try:
            session.start_transaction()
            tx = CountryTransaction(session)
            try:
                yield tx
            except BaseException:
                if tx.active:
                    tx.rollback()
                raise
            if tx.active:
                tx.commit()
        finally:
            session.end_session()

    def insert(self, country: Country, tx: CountryTransaction) -> None:
        """Insert a new country document."""
        self._require_active(tx)
        self.collection.insert_one(country.to_mongo(), session=tx.session)

    def replace(self, country: Country, tx: CountryTransaction) -> None:
        """Replace the document stored under ``country.code``, inserting it if missing."""
        self._require_active(tx)
        self.collection.replace_one(
            {"code": country.code}, country.to_mongo(), upsert=True, session=tx.session
        )

    def remove_by_key(self, code: str, tx: CountryTransaction) -> int:
        """Delete a country by its code; returns the number of removed documents."""
        self._require_active(tx)
        result = self.collection.delete_one({"code": code}, session=tx.session)
        return result.deleted_count

    @staticmethod
    def _require_active(tx: Optional[CountryTransaction]) -> None:
        if tx is None or not tx.active:
            raise RuntimeError("Country writes require an active transaction")
