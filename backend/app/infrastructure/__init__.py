"""Infrastructure Layer — database, logging, cookie transport and other IO-facing pieces.

Invariants:
    - Infrastructure holds no authentication decisions
    - SQLAlchemy errors mapped to DatabaseError before leaving this layer

Design Decisions:
    - Thin adapters over raw libraries (single responsibility)
"""
