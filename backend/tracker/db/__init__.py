"""Database Infrastructure — SQLAlchemy Base shared by every ORM model.

Invariants:
    - Single async engine per app instance (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession)
"""
