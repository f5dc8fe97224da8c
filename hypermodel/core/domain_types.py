"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TypeName, ResourceId, RelationshipKey wrap str; registry, store protocol and
      orchestrator signatures take them, routes wrap raw path parameters once
    - Cardinality encodes the only two valid relationship tokens

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum: compares equal to the raw declaration token ("one"/"many")
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TypeName = NewType("TypeName", str)
ResourceId = NewType("ResourceId", str)
RelationshipKey = NewType("RelationshipKey", str)


# ─── Enums ───────────────────────────────────────────────────────

class Cardinality(str, Enum):
    """How many references a relationship holds."""
    ONE = "one"
    MANY = "many"

    @classmethod
    def parse(cls, token: object) -> "Cardinality | None":
        """Return the matching member, or None for an unrecognized token."""
        for member in cls:
            if token == member.value:
                return member
        return None


class RequestAction(str, Enum):
    """Request kinds the validator distinguishes."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
