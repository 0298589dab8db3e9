"""User ORM — a team member eligible for review assignment while active.

Invariants:
    - id is caller-supplied and globally unique
    - team_name always references an existing team
"""

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from reviewer_service.db.base import Base


class UserModel(Base):
    """User row."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_name: Mapped[str] = mapped_column(
        String(255), ForeignKey("teams.name"), nullable=False, index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
