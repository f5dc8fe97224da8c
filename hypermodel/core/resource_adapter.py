"""Resource Adapter — per-type (de)serialization between records and the wire envelope.

Invariants:
    - Wire keys are derived from declared names by wire_key(); inbound keys are
      looked up against that derivation, so every declared name round-trips
    - Relationship identifiers extract to `{id, type}` only for configured target types;
      anything else extracts to None and is dropped by the resolver
    - Serialized attributes never include a null value
    - Relationships serialize as linkage only (id + type), never full attributes
    - Linkage type comes from the stored reference itself (heterogeneous targets allowed)
    - Every document carries a self link `base/type/id`; every relationship carries
      `self` and `related` links

Design Decisions:
    - Config objects built per request from the registry: link generation needs
      the request's base URL, everything else is static
    - pydantic alias generators for snake_case names: same conversion pydantic applies
      to the schemas, no hand-rolled regex
    - deserialize() returns ApiError instead of raising: envelope shape errors
      are expected client-input failures
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from hypermodel.core.domain_types import TypeName
from hypermodel.core.errors import ApiError, bad_request
from hypermodel.core.model_registry import ModelRegistry, RelationshipDefinition
from hypermodel.schemas.envelope import ResourceIdentifier, ResourceObject

Extractor = Callable[[ResourceIdentifier], dict]

# Store documents carry their identifier under this key
ID_FIELD = "id"


def wire_key(name: str) -> str:
    """snake_case names go out camelCased; any other declared name verbatim."""
    return to_camel(name) if "_" in name else name


def wire_key_map(names: Iterable[str]) -> dict[str, str]:
    """Inbound lookup: wire key (and the declared name itself) → declared name."""
    keys = {name: name for name in names}
    keys.update({wire_key(name): name for name in keys})
    return keys


def extract_reference(identifier: ResourceIdentifier) -> dict:
    """Default extraction rule: keep only the id/type pair."""
    return {"id": identifier.id, "type": identifier.type}


@dataclass(frozen=True)
class LinkContext:
    """Request-derived data needed to build absolute links."""
    base_url: str
    self_url: str

    def link(self, *parts: object) -> str:
        path = "/".join(str(p).strip("/") for p in parts)
        return f"{self.base_url.rstrip('/')}/{path}"


# ─── Deserialization ─────────────────────────────────────────────

@dataclass(frozen=True)
class DeserializerConfig:
    """How to read one type's inbound envelope."""
    type: TypeName
    extractors: Mapping[str, Extractor]
    declared_keys: Mapping[str, str]

    def internal_key(self, key: str) -> str:
        """Undeclared keys pass through unchanged and are dropped by projection."""
        return self.declared_keys.get(key, key)

    def extract(self, value: Any) -> dict | None:
        if not isinstance(value, dict):
            return None
        try:
            identifier = ResourceIdentifier.model_validate(value)
        except ValidationError:
            return None
        extractor = self.extractors.get(identifier.type)
        if extractor is None:
            return None
        return extractor(identifier)

    def relationship_value(self, value: Any) -> Any:
        """Unwrap `{data: ...}` and extract each resource identifier."""
        if isinstance(value, dict) and "data" in value:
            value = value["data"]
        if isinstance(value, (list, tuple)):
            return [self.extract(item) for item in value]
        return self.extract(value)

    def deserialize(self, payload: dict) -> dict | ApiError:
        """Flatten the envelope into `{id?, attr: value, rel_key: ref(s)}`."""
        try:
            resource = ResourceObject.model_validate(payload.get("data"))
        except ValidationError as e:
            return bad_request(
                f"The `data` member is malformed: {_summarize(e)}",
            )
        data: dict[str, Any] = {}
        if resource.id is not None:
            data[ID_FIELD] = resource.id
        for key, value in resource.attributes.items():
            data[self.internal_key(key)] = value
        for key, value in resource.relationships.items():
            data[self.internal_key(key)] = self.relationship_value(value)
        return data


def _summarize(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc']) or 'data'}: {e['msg']}"
        for e in exc.errors()
    )


def get_deserializer_for(
    registry: ModelRegistry, type_name: TypeName,
) -> DeserializerConfig:
    extractors = {
        rel.entity: extract_reference
        for rel in registry.get_relationships_for(type_name)
    }
    metadata = registry.get_metadata_for(type_name)
    return DeserializerConfig(
        type=type_name,
        extractors=extractors,
        declared_keys=wire_key_map([*metadata.attributes, *metadata.relationships]),
    )


# ─── Serialization ───────────────────────────────────────────────

@dataclass(frozen=True)
class SerializerConfig:
    """How to render one type's records as JSON:API documents."""
    type: TypeName
    attributes: tuple[str, ...]
    relationships: tuple[RelationshipDefinition, ...]
    links: LinkContext
    key_for_attribute: Callable[[str], str] = wire_key

    def linkage(self, rel: RelationshipDefinition, value: Any) -> Any:
        if rel.is_many:
            refs = value if isinstance(value, (list, tuple)) else [value]
            return [
                link for link in (self._reference(rel, ref) for ref in refs)
                if link is not None
            ]
        return self._reference(rel, value)

    @staticmethod
    def _reference(rel: RelationshipDefinition, value: Any) -> dict | None:
        if not isinstance(value, dict) or not value.get("id"):
            return None
        return {"type": value.get("type") or rel.entity, "id": str(value["id"])}

    def serialize_record(self, record: dict) -> dict:
        record = {k: v for k, v in record.items() if v is not None}
        record_id = str(record.get(ID_FIELD, ""))
        resource: dict[str, Any] = {
            "type": self.type,
            "id": record_id,
            "attributes": {
                self.key_for_attribute(attr): record[attr]
                for attr in self.attributes if attr in record
            },
        }
        relationships = {}
        for rel in self.relationships:
            if rel.key not in record:
                continue
            relationships[self.key_for_attribute(rel.key)] = {
                "links": {
                    "self": self.links.link(
                        self.type, record_id, "relationships", rel.key,
                    ),
                    "related": self.links.link(self.type, record_id, rel.key),
                },
                "data": self.linkage(rel, record[rel.key]),
            }
        if relationships:
            resource["relationships"] = relationships
        resource["links"] = {"self": self.links.link(self.type, record_id)}
        return resource

    def serialize(self, records: list[dict] | dict | None) -> dict:
        """Render a single record, a collection, or the empty representation."""
        if records is None:
            data: Any = None
        elif isinstance(records, dict):
            data = self.serialize_record(records)
        else:
            data = [self.serialize_record(r) for r in records]
        return {"links": {"self": self.links.self_url}, "data": data}


def get_serializer_for(
    registry: ModelRegistry, type_name: TypeName, links: LinkContext,
) -> SerializerConfig:
    metadata = registry.get_metadata_for(type_name)
    return SerializerConfig(
        type=type_name,
        attributes=tuple(metadata.attributes),
        relationships=tuple(registry.get_relationships_for(type_name)),
        links=links,
    )
