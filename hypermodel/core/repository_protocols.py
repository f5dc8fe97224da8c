"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Absence is reported as None/False, never raised
    - update_one merges: keys not in `changes` keep their stored value

Design Decisions:
    - Protocol over ABC: structural subtyping, the test fake needs no inheritance
    - Async in Protocol: implementations do IO; one awaited call per operation
"""

from typing import Iterable, Protocol

from hypermodel.core.domain_types import ResourceId, TypeName


class DocumentCollection(Protocol):
    """Contract for one type's document collection — implemented by shell."""
    async def find_all(self) -> list[dict]: ...
    async def find_one(self, resource_id: ResourceId) -> dict | None: ...
    async def find_many(self, resource_ids: Iterable[ResourceId]) -> list[dict]: ...
    async def insert_one(self, document: dict) -> ResourceId: ...
    async def update_one(self, resource_id: ResourceId, changes: dict) -> bool: ...
    async def remove(self, resource_id: ResourceId) -> bool: ...


class DocumentStore(Protocol):
    """Contract for obtaining per-type collections."""
    def collection(self, type_name: TypeName) -> DocumentCollection: ...
