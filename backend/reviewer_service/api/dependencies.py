"""Dependency Wiring — builds the AssignmentService for each request.

Invariants:
    - One SqlStorage instance backs all four storage protocols
    - Each request gets its own service; sessions are opened per transaction, never shared
    - Text query parameters are stripped and must stay non-empty, matching body validation
"""

from fastapi import Depends
from fastapi.exceptions import RequestValidationError

from reviewer_service.config import get_settings
from reviewer_service.infrastructure.database import (
    DatabaseSessionManager, get_db_manager,
)
from reviewer_service.infrastructure.sql_storage import SqlStorage
from reviewer_service.services.assignment_service import AssignmentService


def get_assignment_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
) -> AssignmentService:
    settings = get_settings()
    storage = SqlStorage(db, max_retries=settings.transaction_max_retries)
    return AssignmentService(
        storage, storage, storage, storage,
        reviewers_per_pull_request=settings.reviewers_per_pull_request,
        default_timeout=settings.operation_timeout_seconds,
    )


def required_query_text(value: str, name: str) -> str:
    """Strip a query parameter; whitespace-only values are rejected like body fields."""
    stripped = value.strip()
    if not stripped:
        raise RequestValidationError([{
            "loc": ("query", name),
            "msg": f"{name} cannot be empty or whitespace",
            "type": "value_error",
        }])
    return stripped
