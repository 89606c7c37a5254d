"""Database Infrastructure - SQLAlchemy declarative base.

Invariants:
    - All sessions are async (AsyncSession)
    - asyncpg in production, aiosqlite for local runs and tests
"""
