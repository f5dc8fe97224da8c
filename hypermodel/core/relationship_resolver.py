"""Relationship Resolver — normalizes relationship payload shapes to declared cardinality.

Invariants:
    - Keys absent from the input leave the target's value untouched (partial update)
    - many: always a list; scalars wrapped, falsy entries dropped
    - one: always a single reference or None; lists reduced to first truthy entry
    - Inputs are never mutated; a new dict is returned

Design Decisions:
    - Reconcile mismatched client shapes instead of rejecting them
"""

from typing import Any, Iterable

from hypermodel.core.model_registry import RelationshipDefinition


def resolve_many(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return [item for item in value if item]
    if value:
        return [value]
    return []


def resolve_one(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        value = next((item for item in value if item), None)
    return value or None


def apply_relationship_data(
    relationships: Iterable[RelationshipDefinition],
    data: dict,
    apply_to: dict,
) -> dict:
    """Copy each declared relationship present in `data` onto `apply_to`, normalized."""
    applied = dict(apply_to)
    for rel in relationships:
        if rel.key not in data:
            continue
        value = data[rel.key]
        applied[rel.key] = resolve_many(value) if rel.is_many else resolve_one(value)
    return applied
