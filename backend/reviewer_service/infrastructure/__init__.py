"""Infrastructure Layer — database access, storage adapter, and logging.

Invariants:
    - Infrastructure implements the protocols in core/repository_protocols.py
    - All SQLAlchemy failures surface as core errors (domain or DatabaseError)
"""
