"""Reviewer Selection — pure candidate filtering and random sampling.

Invariants:
    - exclude_candidates preserves input order; empty exclusion returns input unchanged
    - sample_reviewers returns min(len(candidates), max(quantity, 0)) distinct ids
    - Every sampled id belongs to the candidate list
    - No IO, no global random state: the random source is passed in
"""

import random
from collections.abc import Iterable, Sequence

from reviewer_service.core.domain_types import User, UserId


def exclude_candidates(
    users: Sequence[User], exclude_ids: Iterable[str],
) -> list[User]:
    """Drop every user whose id is in exclude_ids."""
    excluded = set(exclude_ids)
    if not excluded:
        return list(users)
    return [user for user in users if user.user_id not in excluded]


def sample_reviewers(
    candidates: Sequence[User],
    quantity: int,
    rng: random.Random | None = None,
) -> list[UserId]:
    """Pick ``quantity`` distinct reviewer ids uniformly at random.

    Takes the first ``quantity`` entries of a random permutation of the
    candidate indices. When there are no more candidates than requested,
    every candidate id is returned.
    """
    if quantity <= 0 or not candidates:
        return []
    if quantity >= len(candidates):
        return [user.user_id for user in candidates]

    rng = rng or random.Random()
    order = list(range(len(candidates)))
    rng.shuffle(order)
    return [candidates[i].user_id for i in order[:quantity]]
