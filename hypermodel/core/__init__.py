"""Core Layer — registry, resolver, validator and adapter. No IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the orchestrator in
      services/ wraps these functions around store calls
"""
