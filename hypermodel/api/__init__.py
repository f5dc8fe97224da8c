"""API Layer — FastAPI routes, responses and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON:API documents (application/vnd.api+json)

Design Decisions:
    - Thin routes delegate to the resource orchestrator
"""
