"""
In-memory stand-in for the Firestore client.

Used when USE_MOCK_DB=true (local development without credentials) and by
the test suite. Only the subset of the client API the services rely on is
implemented. Data can optionally be persisted to a JSON file so a dev server
keeps its records across restarts.
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

_OPERATORS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    "in": lambda a, b: a in b,
}


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field: str) -> Any:
        return (self._data or {}).get(field)


class MockDocumentReference:
    def __init__(self, store: "MockFirestore", collection: str, doc_id: str):
        self._store = store
        self._collection = collection
        self.id = doc_id

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        with self._store._lock:
            docs = self._store._data.setdefault(self._collection, {})
            if merge and self.id in docs:
                docs[self.id].update(copy.deepcopy(data))
            else:
                docs[self.id] = copy.deepcopy(data)
        self._store._persist()

    def update(self, data: Dict[str, Any]) -> None:
        with self._store._lock:
            docs = self._store._data.get(self._collection, {})
            if self.id not in docs:
                raise LookupError(f"No document to update: {self._collection}/{self.id}")
            docs[self.id].update(copy.deepcopy(data))
        self._store._persist()

    def delete(self) -> None:
        with self._store._lock:
            self._store._data.get(self._collection, {}).pop(self.id, None)
        self._store._persist()

    def get(self) -> MockDocumentSnapshot:
        with self._store._lock:
            data = self._store._data.get(self._collection, {}).get(self.id)
            return MockDocumentSnapshot(self, copy.deepcopy(data))


class MockQuery:
    def __init__(self, store: "MockFirestore", collection: str):
        self._store = store
        self._collection = collection
        self._filters: List[Tuple[str, str, Any]] = []
        self._order: Optional[Tuple[str, str]] = None
        self._limit: Optional[int] = None

    def _clone(self) -> "MockQuery":
        query = MockQuery(self._store, self._collection)
        query._filters = list(self._filters)
        query._order = self._order
        query._limit = self._limit
        return query

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string not in _OPERATORS:
            raise ValueError(f"Unsupported operator in mock Firestore: {op_string}")
        query = self._clone()
        query._filters.append((field_path, op_string, value))
        return query

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "MockQuery":
        query = self._clone()
        query._order = (field_path, direction)
        return query

    def limit(self, count: int) -> "MockQuery":
        query = self._clone()
        query._limit = count
        return query

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._store._lock:
            items = list(self._store._data.get(self._collection, {}).items())

        matched = []
        for doc_id, data in items:
            if all(_OPERATORS[op](data.get(field), value) for field, op, value in self._filters):
                matched.append((doc_id, data))

        if self._order:
            field, direction = self._order
            present = [item for item in matched if item[1].get(field) is not None]
            # Firestore omits documents lacking the ordered field
            matched = sorted(
                present,
                key=lambda item: item[1][field],
                reverse=str(direction).upper() == "DESCENDING",
            )

        if self._limit is not None:
            matched = matched[: self._limit]

        for doc_id, data in matched:
            ref = MockDocumentReference(self._store, self._collection, doc_id)
            yield MockDocumentSnapshot(ref, copy.deepcopy(data))

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


class MockCollectionReference(MockQuery):
    def __init__(self, store: "MockFirestore", name: str):
        super().__init__(store, name)
        self.id = name

    def document(self, doc_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, self._collection, doc_id or uuid.uuid4().hex[:20])

    def add(self, data: Dict[str, Any]) -> Tuple[datetime, MockDocumentReference]:
        ref = self.document()
        ref.set(data)
        return datetime.now(timezone.utc), ref


class MockFirestore:
    """Dict-of-dicts document store: {collection: {doc_id: data}}."""

    def __init__(self, path: Optional[str] = None):
        self._path = path
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._data = json.load(f)
            logger.info(f"[MOCK DB] Loaded {sum(len(d) for d in self._data.values())} documents from {path}")

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            return [MockCollectionReference(self, name) for name in self._data]

    def _persist(self) -> None:
        if not self._path:
            return
        with self._lock:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, default=str)


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    return MockFirestore(path)
