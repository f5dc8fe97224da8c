"""Resource Orchestrator — generic CRUD and relationship operations for every registered type.

Invariants:
    - Every operation runs the request validator first; nothing touches the store
      on invalid input (create/update never partially persist)
    - Create projects input onto exactly the declared attributes (missing → None)
    - Update projects only attributes present in the payload and merges them;
      the response is built from a re-read of the stored record
    - Identifiers are always store-assigned
    - Broken relationship references resolve to the empty representation, never an error
    - Expected failures come back as ResourceOutcome.error; only unexpected
      failures (store, malformed registry lookups) raise

Design Decisions:
    - One orchestrator per request: holds the request-scoped store and link
      context, the registry is shared by reference
    - Sequential awaits only: relationship targets are fetched after the parent,
      never concurrently
"""

import logging
from dataclasses import dataclass
from typing import Any

from hypermodel.core.domain_types import (
    RelationshipKey, RequestAction, ResourceId, TypeName,
)
from hypermodel.core.errors import (
    ApiError, bad_request, not_found, not_implemented,
)
from hypermodel.core.model_registry import ModelRegistry, RelationshipDefinition
from hypermodel.core.relationship_resolver import apply_relationship_data
from hypermodel.core.repository_protocols import DocumentStore
from hypermodel.core.request_validator import validate_request
from hypermodel.core.resource_adapter import (
    ID_FIELD, LinkContext, SerializerConfig,
    get_deserializer_for, get_serializer_for,
)
from hypermodel.infrastructure.observability import resource_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceOutcome:
    """Result of an orchestrated operation: a document, no content, or an error."""
    status_code: int
    document: dict | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, document: dict) -> "ResourceOutcome":
        return cls(status_code=200, document=document)

    @classmethod
    def no_content(cls) -> "ResourceOutcome":
        return cls(status_code=204)

    @classmethod
    def failure(cls, error: ApiError) -> "ResourceOutcome":
        return cls(status_code=error.http_status, error=error)


def project_attributes(attributes: tuple[str, ...], data: dict) -> dict:
    """Every declared attribute; values the payload omits become None."""
    return {attr: data.get(attr) for attr in attributes}


def project_present_attributes(attributes: tuple[str, ...], data: dict) -> dict:
    """Only declared attributes the payload explicitly carries (None clears)."""
    return {attr: data[attr] for attr in attributes if attr in data}


def _record_not_found(resource_id: ResourceId) -> ApiError:
    return not_found(f"No record found for ID: {resource_id}")


class ResourceOrchestrator:
    """Sequences validator → deserializer → resolver → store → serializer."""

    def __init__(
        self, registry: ModelRegistry, store: DocumentStore, links: LinkContext,
    ):
        self._registry = registry
        self._store = store
        self._links = links

    def _serializer(self, type_name: TypeName) -> SerializerConfig:
        return get_serializer_for(self._registry, type_name, self._links)

    def _prepare(
        self, type_name: TypeName, payload: Any, partial: bool,
    ) -> dict | ApiError:
        """Deserialize, project onto declared attributes, normalize relationships."""
        data = get_deserializer_for(self._registry, type_name).deserialize(payload)
        if isinstance(data, ApiError):
            return data
        attributes = self._registry.get_metadata_for(type_name).attributes
        if partial:
            projected = project_present_attributes(attributes, data)
        else:
            projected = project_attributes(attributes, data)
        return apply_relationship_data(
            self._registry.get_relationships_for(type_name), data, projected,
        )

    async def list_resources(self, type_name: TypeName) -> ResourceOutcome:
        error = validate_request(self._registry, type_name, RequestAction.READ)
        if error:
            return ResourceOutcome.failure(error)
        records = await self._store.collection(type_name).find_all()
        return ResourceOutcome.success(self._serializer(type_name).serialize(records))

    async def create_resource(
        self, type_name: TypeName, payload: Any,
    ) -> ResourceOutcome:
        error = validate_request(
            self._registry, type_name, RequestAction.CREATE, payload,
        )
        if error:
            return ResourceOutcome.failure(error)
        to_insert = self._prepare(type_name, payload, partial=False)
        if isinstance(to_insert, ApiError):
            return ResourceOutcome.failure(to_insert)

        resource_id = await self._store.collection(type_name).insert_one(to_insert)
        to_insert[ID_FIELD] = resource_id
        logger.info(
            f"Created {type_name} {resource_id}",
            extra=resource_context(type_name, resource_id),
        )
        return ResourceOutcome.success(
            self._serializer(type_name).serialize(to_insert),
        )

    async def retrieve_resource(
        self, type_name: TypeName, resource_id: ResourceId,
    ) -> ResourceOutcome:
        error = validate_request(self._registry, type_name, RequestAction.READ)
        if error:
            return ResourceOutcome.failure(error)
        record = await self._store.collection(type_name).find_one(resource_id)
        if record is None:
            return ResourceOutcome.failure(_record_not_found(resource_id))
        return ResourceOutcome.success(self._serializer(type_name).serialize(record))

    async def update_resource(
        self, type_name: TypeName, resource_id: ResourceId, payload: Any,
    ) -> ResourceOutcome:
        error = validate_request(
            self._registry, type_name, RequestAction.UPDATE, payload,
        )
        if error:
            return ResourceOutcome.failure(error)
        if str(payload["data"]["id"]) != resource_id:
            return ResourceOutcome.failure(bad_request(
                "The ID found in the request URI does not match "
                "the value of the `id` member.",
            ))
        to_update = self._prepare(type_name, payload, partial=True)
        if isinstance(to_update, ApiError):
            return ResourceOutcome.failure(to_update)

        collection = self._store.collection(type_name)
        if not await collection.update_one(resource_id, to_update):
            return ResourceOutcome.failure(_record_not_found(resource_id))
        record = await collection.find_one(resource_id)
        if record is None:
            return ResourceOutcome.failure(_record_not_found(resource_id))
        logger.info(
            f"Updated {type_name} {resource_id}: {sorted(to_update)}",
            extra=resource_context(type_name, resource_id),
        )
        return ResourceOutcome.success(self._serializer(type_name).serialize(record))

    async def delete_resource(
        self, type_name: TypeName, resource_id: ResourceId,
    ) -> ResourceOutcome:
        error = validate_request(self._registry, type_name, RequestAction.DELETE)
        if error:
            return ResourceOutcome.failure(error)
        collection = self._store.collection(type_name)
        if await collection.find_one(resource_id) is None:
            return ResourceOutcome.failure(_record_not_found(resource_id))
        await collection.remove(resource_id)
        logger.info(
            f"Deleted {type_name} {resource_id}",
            extra=resource_context(type_name, resource_id),
        )
        return ResourceOutcome.no_content()

    async def retrieve_relationship(
        self, type_name: TypeName, resource_id: ResourceId, key: RelationshipKey,
    ) -> ResourceOutcome:
        """Serialize the resource(s) a relationship points at."""
        error = validate_request(self._registry, type_name, RequestAction.READ)
        if error:
            return ResourceOutcome.failure(error)
        if not self._registry.has_relationship(type_name, key):
            return ResourceOutcome.failure(bad_request(
                f"The relationship '{key}' does not exist on model '{type_name}'",
            ))
        record = await self._store.collection(type_name).find_one(resource_id)
        if record is None:
            return ResourceOutcome.failure(_record_not_found(resource_id))

        rel = self._registry.get_relationship_for(type_name, key)
        related = await self._load_related(rel, record.get(key))
        return ResourceOutcome.success(self._serializer(rel.entity).serialize(related))

    async def _load_related(
        self, rel: RelationshipDefinition, value: Any,
    ) -> list[dict] | dict | None:
        empty: list[dict] | None = [] if rel.is_many else None
        if not value:
            return empty
        collection = self._store.collection(rel.entity)
        if rel.is_many:
            if not isinstance(value, list):
                return empty
            identifiers = [
                ref["id"] for ref in value
                if isinstance(ref, dict) and ref.get("id")
            ]
            if not identifiers:
                return empty
            return await collection.find_many(identifiers)
        if not isinstance(value, dict) or not value.get("id"):
            return empty
        related = await collection.find_one(value["id"])
        if related is None:
            logger.debug(
                f"Broken {rel.key} reference to {rel.entity} {value['id']}",
                extra=resource_context(rel.entity, value["id"], rel.key),
            )
        return related

    async def mutate_relationship(self, type_name: TypeName) -> ResourceOutcome:
        """Writes through the `related` link are reserved."""
        error = validate_request(self._registry, type_name, RequestAction.READ)
        if error:
            return ResourceOutcome.failure(error)
        return ResourceOutcome.failure(not_implemented(
            "Modifying relationships via the `related` link is not yet available.",
        ))
