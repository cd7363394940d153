"""Services Layer — async orchestration around the pure authentication core.

Invariants:
    - Services own all IO (store calls); core/ owns all decisions
    - One class per concern: reconciler, login writer, member store

Design Decisions:
    - Store injected as a Protocol: reconciler tests run against an in-memory fake
"""
