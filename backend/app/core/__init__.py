"""Core Layer — pure authentication-state logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, db/ or models/
    - All functions are pure and deterministic given an explicit `now`

Design Decisions:
    - Functional core separated from imperative shell (impureim sandwich)
"""
