"""Services Layer — the resource orchestrator.

Invariants:
    - Services sequence core functions around store calls; they hold no
      process-wide state
"""
