"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Reviewer selection helpers are pure; randomness is injected by the caller
"""
