import types

import pytest
from fastapi.testclient import TestClient

from portal.db.memory_store import MemoryFirestore
from portal.db.store import create_memory_store
from portal.main import create_app


@pytest.fixture
def store() -> MemoryFirestore:
    return MemoryFirestore()


@pytest.fixture
def seeded_store() -> MemoryFirestore:
    return create_memory_store(seed=True)


@pytest.fixture
def client(seeded_store) -> TestClient:
    return TestClient(create_app(store=seeded_store))


# ============================================================
# Minimal pymongo stand-in for the MongoDB backend tests.
# Follows MongoDB's matching rules: a scalar condition also matches
# array elements, and a null condition also matches missing fields.
# ============================================================

_ABSENT = object()


def _equals(value, target):
    if target is None:
        return value is _ABSENT or value is None
    if value is _ABSENT:
        return False
    if value == target:
        return True
    return isinstance(value, list) and target in value


def _match_operators(value, operators):
    for op, arg in operators.items():
        if op == "$eq":
            ok = _equals(value, arg)
        elif op == "$in":
            ok = any(_equals(value, target) for target in arg)
        elif op == "$not":
            ok = not _match_operators(value, arg)
        elif op == "$type":
            assert arg == "array", f"unsupported $type {arg!r}"
            ok = isinstance(value, list)
        elif op == "$elemMatch":
            ok = isinstance(value, list) and any(_match_operators(item, arg) for item in value)
        else:
            raise AssertionError(f"unsupported operator {op!r}")
        if not ok:
            return False
    return True


def _match_clause(doc, field, cond):
    value = doc.get(field, _ABSENT)
    if isinstance(cond, dict) and cond and all(key.startswith("$") for key in cond):
        return _match_operators(value, cond)
    return _equals(value, cond)


def _match(doc, query):
    for key, cond in query.items():
        if key == "$and":
            if not all(_match(doc, clause) for clause in cond):
                return False
        elif not _match_clause(doc, key, cond):
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, field, direction):
        present = [d for d in self._docs if d.get(field) is not None]
        missing = [d for d in self._docs if d.get(field) is None]
        present.sort(key=lambda d: d[field], reverse=direction == -1)
        # mongo puts missing fields first ascending, last descending
        self._docs = missing + present if direction == 1 else present + missing
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter([dict(d) for d in self._docs])


class FakeCollection:
    def __init__(self):
        self.docs = []

    def _find_index(self, query):
        for index, doc in enumerate(self.docs):
            if _match(doc, query):
                return index
        return -1

    def find(self, query=None):
        query = query or {}
        self.last_query = query
        return FakeCursor([d for d in self.docs if _match(d, query)])

    def find_one(self, query):
        index = self._find_index(query)
        return dict(self.docs[index]) if index != -1 else None

    def replace_one(self, query, replacement, upsert=False):
        index = self._find_index(query)
        if index != -1:
            self.docs[index] = dict(replacement)
            return types.SimpleNamespace(matched_count=1, upserted_id=None)
        if upsert:
            self.docs.append(dict(replacement))
            return types.SimpleNamespace(matched_count=0, upserted_id=replacement["_id"])
        return types.SimpleNamespace(matched_count=0, upserted_id=None)

    def update_one(self, query, update, upsert=False):
        assert not upsert
        index = self._find_index(query)
        if index == -1:
            return types.SimpleNamespace(matched_count=0, modified_count=0)
        self.docs[index] = {**self.docs[index], **update["$set"]}
        return types.SimpleNamespace(matched_count=1, modified_count=1)

    def delete_one(self, query):
        index = self._find_index(query)
        if index != -1:
            del self.docs[index]
        return types.SimpleNamespace(deleted_count=1 if index != -1 else 0)


class FakeDatabase:
    def __init__(self):
        self.cols = {}

    def __getitem__(self, name):
        return self.cols.setdefault(name, FakeCollection())


@pytest.fixture
def fake_mongo_db() -> FakeDatabase:
    return FakeDatabase()
