"""Pydantic Schemas — wire envelope shapes validated at the system boundary.

Invariants:
    - Schemas validate structure only; attribute values are never type-checked

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
