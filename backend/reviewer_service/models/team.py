"""Team ORM — a named group of users.

Invariants:
    - name is the primary key (unique, immutable once created)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from reviewer_service.db.base import Base


class TeamModel(Base):
    """Team row. Members live in `users.team_name`."""
    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
