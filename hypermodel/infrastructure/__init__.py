"""Infrastructure Layer — database sessions, document store, logging setup.

Invariants:
    - Only this layer talks to SQLAlchemy engines and sessions
"""
