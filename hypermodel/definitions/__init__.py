"""Model Declarations — the resource types this service exposes.

Invariants:
    - Each declaration is a plain dict: type, attributes, relationships
    - MODEL_DECLARATIONS is the complete list handed to build_registry() at boot

Design Decisions:
    - Explicit list over package scanning: adding a type means editing this file
"""

from hypermodel.definitions.organization import ORGANIZATION
from hypermodel.definitions.tags import TAGS

MODEL_DECLARATIONS = [
    ORGANIZATION,
    TAGS,
]
