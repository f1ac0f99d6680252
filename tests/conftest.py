from __future__ import annotations

from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError

from repositories.country_repository import CountryRepository
from services import country_service


class FakeSession:
    """Stages writes until commit, like a Mongo transaction."""

    def __init__(self):
        self.events: list[str] = []
        self.pending: list = []
        self.fail_commit: Exception | None = None

    def start_transaction(self):
        self.events.append("start")

    def commit_transaction(self):
        self.events.append("commit")
        if self.fail_commit is not None:
            self.pending = []
            raise self.fail_commit
        for apply in self.pending:
            apply()
        self.pending = []

    def abort_transaction(self):
        self.events.append("abort")
        self.pending = []

    def end_session(self):
        self.events.append("end")


class FakeCollection:
    def __init__(self, docs=None):
        self.docs = [dict(doc) for doc in (docs or [])]
        self.indexes: list = []
        self.fail_next_write: Exception | None = None

    @staticmethod
    def _matches(doc, query):
        return all(doc.get(k) == v for k, v in (query or {}).items())

    @staticmethod
    def _project(doc, projection):
        out = dict(doc)
        if projection and projection.get("_id") == 0:
            out.pop("_id", None)
        return out

    def find(self, query=None, projection=None):
        for doc in self.docs:
            if self._matches(doc, query):
                yield self._project(doc, projection)

    def find_one(self, query=None, projection=None):
        return next(self.find(query, projection), None)

    def count_documents(self, query):
        return sum(1 for _ in self.find(query))

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))

    def _check_failure(self):
        if self.fail_next_write is not None:
            exc, self.fail_next_write = self.fail_next_write, None
            raise exc

    def _stage(self, session, apply):
        if session is None:
            apply()
        else:
            session.pending.append(apply)

    def insert_one(self, doc, session=None):
        self._check_failure()
        if self.find_one({"code": doc.get("code")}) is not None:
            raise DuplicateKeyError("E11000 duplicate key error collection: countries")
        doc = dict(doc, _id=f"oid-{doc.get('code')}")
        self._stage(session, lambda: self.docs.append(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def replace_one(self, query, doc, upsert=False, session=None):
        self._check_failure()

        def apply():
            for index, existing in enumerate(self.docs):
                if self._matches(existing, query):
                    self.docs[index] = dict(doc, _id=existing.get("_id"))
                    return
            if upsert:
                self.docs.append(dict(doc))

        self._stage(session, apply)
        return SimpleNamespace(matched_count=1)

    def delete_one(self, query, session=None):
        self._check_failure()
        target = next((d for d in self.docs if self._matches(d, query)), None)
        if target is not None:
            self._stage(session, lambda: self.docs.remove(target))
        return SimpleNamespace(deleted_count=1 if target is not None else 0)


class FakeMongo:
    def __init__(self, collection):
        self._collection = collection
        self.sessions: list[FakeSession] = []
        self.fail_next_commit: Exception | None = None

    def collection(self, name):  # noqa: ARG002 - single collection
        return self._collection

    def start_session(self):
        session = FakeSession()
        session.fail_commit, self.fail_next_commit = self.fail_next_commit, None
        self.sessions.append(session)
        return session


@pytest.fixture
def store():
    return FakeCollection()


@pytest.fixture
def mongo(store):
    return FakeMongo(store)


@pytest.fixture
def repo(mongo):
    return CountryRepository(connection=mongo)


@pytest.fixture
def service(monkeypatch, repo):
    """country_service wired to the in-memory store."""
    monkeypatch.setattr(country_service, "_repo", repo)
    return country_service
