"""Document Store — per-type collections over the resource_documents table.

Invariants:
    - Every query is scoped by type: a collection never sees other types' rows
    - update_one merges into the stored body (never replaces it)
    - Absence is reported as None/False, never raised
    - find_many returns records in the order of the requested ids
    - Each write commits on its own; no cross-operation transaction

Design Decisions:
    - Thin adapter over AsyncSession: the request-scoped session from get_db is
      reused, so errors surface through DatabaseSessionManager's mapping
"""

import logging
from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from hypermodel.core.domain_types import ResourceId, TypeName

from hypermodel.models.resource_document import (
    ResourceDocument, generate_resource_id,
)

logger = logging.getLogger(__name__)


class SqlDocumentCollection:
    """DocumentCollection implementation for one resource type."""

    def __init__(self, db: AsyncSession, type_name: TypeName):
        self._db = db
        self._type = type_name

    async def _get_row(self, resource_id: ResourceId) -> ResourceDocument | None:
        result = await self._db.execute(
            select(ResourceDocument).where(
                ResourceDocument.type == self._type,
                ResourceDocument.id == resource_id,
            ),
        )
        return result.scalar_one_or_none()

    async def find_all(self) -> list[dict]:
        result = await self._db.execute(
            select(ResourceDocument)
            .where(ResourceDocument.type == self._type)
            .order_by(ResourceDocument.created_at),
        )
        return [row.to_record() for row in result.scalars().all()]

    async def find_one(self, resource_id: ResourceId) -> dict | None:
        row = await self._get_row(resource_id)
        return row.to_record() if row else None

    async def find_many(self, resource_ids: Iterable[ResourceId]) -> list[dict]:
        ids = [str(i) for i in resource_ids]
        if not ids:
            return []
        result = await self._db.execute(
            select(ResourceDocument).where(
                ResourceDocument.type == self._type,
                ResourceDocument.id.in_(ids),
            ),
        )
        rows = {row.id: row for row in result.scalars().all()}
        # Requested order, not table order; duplicates and missing ids collapse
        ordered = dict.fromkeys(i for i in ids if i in rows)
        return [rows[i].to_record() for i in ordered]

    async def insert_one(self, document: dict) -> ResourceId:
        body = {k: v for k, v in document.items() if k != "id"}
        row = ResourceDocument(
            id=generate_resource_id(), type=self._type, body=body,
        )
        self._db.add(row)
        await self._db.commit()
        return ResourceId(row.id)

    async def update_one(self, resource_id: ResourceId, changes: dict) -> bool:
        row = await self._get_row(resource_id)
        if not row:
            return False
        # New dict: plain JSON columns only detect reassignment
        row.body = {**(row.body or {}), **changes}
        await self._db.commit()
        return True

    async def remove(self, resource_id: ResourceId) -> bool:
        result = await self._db.execute(
            delete(ResourceDocument).where(
                ResourceDocument.type == self._type,
                ResourceDocument.id == resource_id,
            ),
        )
        await self._db.commit()
        return result.rowcount > 0


class SqlDocumentStore:
    """DocumentStore bound to one request's AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    def collection(self, type_name: TypeName) -> SqlDocumentCollection:
        return SqlDocumentCollection(self._db, type_name)
