"""In-memory DocumentStore — satisfies the collection protocol without a database.

Records every write so tests can assert that invalid input never reaches the store.
"""

import itertools
from collections import defaultdict
from typing import Iterable

from hypermodel.core.domain_types import ResourceId, TypeName

_ids = itertools.count(1)


class InMemoryCollection:
    def __init__(self, store: "InMemoryDocumentStore", type_name: str):
        self._store = store
        self._docs = store.documents[type_name]
        self._type = type_name

    async def find_all(self) -> list[dict]:
        return [{**doc, "id": rid} for rid, doc in self._docs.items()]

    async def find_one(self, resource_id: str) -> dict | None:
        doc = self._docs.get(resource_id)
        return {**doc, "id": resource_id} if doc is not None else None

    async def find_many(self, resource_ids: Iterable[str]) -> list[dict]:
        return [
            {**self._docs[rid], "id": rid}
            for rid in resource_ids if rid in self._docs
        ]

    async def insert_one(self, document: dict) -> ResourceId:
        resource_id = ResourceId(f"{self._type}-{next(_ids)}")
        self._docs[resource_id] = {k: v for k, v in document.items() if k != "id"}
        self._store.writes.append(("insert", self._type, resource_id))
        return resource_id

    async def update_one(self, resource_id: str, changes: dict) -> bool:
        self._store.writes.append(("update", self._type, resource_id))
        if resource_id not in self._docs:
            return False
        self._docs[resource_id] = {**self._docs[resource_id], **changes}
        return True

    async def remove(self, resource_id: str) -> bool:
        self._store.writes.append(("remove", self._type, resource_id))
        return self._docs.pop(resource_id, None) is not None


class InMemoryDocumentStore:
    def __init__(self):
        self.documents: dict[str, dict[str, dict]] = defaultdict(dict)
        self.writes: list[tuple[str, str, str]] = []

    def collection(self, type_name: TypeName) -> InMemoryCollection:
        return InMemoryCollection(self, type_name)
