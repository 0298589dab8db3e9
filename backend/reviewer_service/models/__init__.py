"""ORM Models — SQLAlchemy declarative models for teams, users and pull requests.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all
"""

from reviewer_service.models.team import TeamModel  # noqa: F401
from reviewer_service.models.user import UserModel  # noqa: F401
from reviewer_service.models.pull_request import (  # noqa: F401
    PullRequestModel, PullRequestReviewerModel,
)
