"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - All sessions are async (AsyncSession)
    - asyncpg driver in production, aiosqlite in tests
"""
