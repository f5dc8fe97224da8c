"""Model Registry — immutable catalog of model definitions, built once at boot.

Invariants:
    - Populated only through build_registry(); read-only afterwards
    - Attribute list is the sole source of truth for what is persisted/serialized
    - Malformed relationship declarations (no entity, unknown cardinality) are
      excluded from get_relationships_for() but still count for has_relationship()
    - get_relationship_for() raises RelationshipNotDefinedError for a key with no
      well-formed definition

Design Decisions:
    - Explicit registration call over module discovery: every model visible in
      models/__init__.py
    - Tolerant policy for bad relationship metadata: boot logs a warning instead
      of failing, matching how existing declarations were always treated
    - MappingProxyType over dict: concurrent readers need no synchronization
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from hypermodel.core.domain_types import Cardinality, RelationshipKey, TypeName
from hypermodel.core.errors import (
    RelationshipNotDefinedError, ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelationshipDefinition:
    """Well-formed relationship: key, cardinality and target type."""
    key: RelationshipKey
    cardinality: Cardinality
    entity: TypeName

    @property
    def is_many(self) -> bool:
        return self.cardinality is Cardinality.MANY


@dataclass(frozen=True)
class ModelDefinition:
    """Static declaration of a resource type."""
    type: TypeName
    attributes: tuple[str, ...]
    relationships: Mapping[RelationshipKey, Mapping[str, Any]] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    @classmethod
    def from_declaration(cls, declaration: Mapping[str, Any]) -> "ModelDefinition":
        """Build a definition from a plain-dict model declaration."""
        type_name = declaration.get("type")
        if not type_name or not isinstance(type_name, str):
            raise ValueError("Model declarations must contain a string `type`")
        attributes = declaration.get("attributes", [])
        if not isinstance(attributes, (list, tuple)):
            raise ValueError(f"Attributes of model {type_name} must be a list")
        relationships = declaration.get("relationships") or {}
        if not isinstance(relationships, Mapping):
            relationships = {}
        return cls(
            type=TypeName(type_name),
            attributes=tuple(attributes),
            relationships=MappingProxyType({
                RelationshipKey(key): MappingProxyType(dict(value))
                if isinstance(value, Mapping) else MappingProxyType({})
                for key, value in relationships.items()
            }),
        )


def parse_relationship(
    key: RelationshipKey, declaration: Mapping[str, Any],
) -> RelationshipDefinition | None:
    """Return a well-formed definition, or None when the declaration is malformed."""
    cardinality = Cardinality.parse(declaration.get("type"))
    entity = declaration.get("entity")
    if not entity or cardinality is None:
        return None
    return RelationshipDefinition(
        key=key, cardinality=cardinality, entity=TypeName(entity),
    )


class ModelRegistry:
    """Read-only lookup over registered model definitions."""

    def __init__(self, definitions: Iterable[ModelDefinition]):
        models: dict[TypeName, ModelDefinition] = {}
        resolved: dict[TypeName, tuple[RelationshipDefinition, ...]] = {}
        for definition in definitions:
            if definition.type in models:
                raise ValueError(f"Model type {definition.type} registered twice")
            models[definition.type] = definition
            resolved[definition.type] = _resolve_relationships(definition)
        self._models = MappingProxyType(models)
        self._relationships = MappingProxyType(resolved)

    def exists(self, type_name: TypeName) -> bool:
        return type_name in self._models

    def get_all_types(self) -> list[TypeName]:
        return list(self._models)

    def get_metadata_for(self, type_name: TypeName) -> ModelDefinition:
        """Get the definition for a type. Raises ResourceNotFoundError if unregistered."""
        try:
            return self._models[type_name]
        except KeyError:
            raise ResourceNotFoundError(type_name) from None

    def get_relationship_keys(self, type_name: TypeName) -> list[RelationshipKey]:
        """All declared relationship keys, well-formed or not."""
        return list(self.get_metadata_for(type_name).relationships)

    def has_relationship(self, type_name: TypeName, key: RelationshipKey) -> bool:
        return key in self.get_relationship_keys(type_name)

    def get_relationships_for(
        self, type_name: TypeName,
    ) -> list[RelationshipDefinition]:
        """Well-formed relationship definitions only."""
        self.get_metadata_for(type_name)
        return list(self._relationships[type_name])

    def get_relationship_for(
        self, type_name: TypeName, key: RelationshipKey,
    ) -> RelationshipDefinition:
        for rel in self.get_relationships_for(type_name):
            if rel.key == key:
                return rel
        raise RelationshipNotDefinedError(type_name, key)


def _resolve_relationships(
    definition: ModelDefinition,
) -> tuple[RelationshipDefinition, ...]:
    resolved = []
    for key, declaration in definition.relationships.items():
        rel = parse_relationship(key, declaration)
        if rel is None:
            logger.warning(
                f"Ignoring malformed relationship '{key}' on model "
                f"'{definition.type}': {dict(declaration)}",
                extra={"resource_type": definition.type},
            )
            continue
        resolved.append(rel)
    return tuple(resolved)


def build_registry(
    declarations: Iterable[Mapping[str, Any]],
) -> ModelRegistry:
    """Boot-time registration: turn model declarations into a registry."""
    registry = ModelRegistry(
        ModelDefinition.from_declaration(d) for d in declarations
    )
    logger.info(f"Registered model types: {registry.get_all_types()}")
    return registry
