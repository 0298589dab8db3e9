"""HTTP Routes — verifies status codes, payload shapes and error envelopes.

Invariants:
    - Domain errors map to their documented status and code
    - Malformed bodies and query strings become 400 BAD_REQUEST
    - createdAt is always present on a pull request; mergedAt only once merged
"""


def _error_code(response) -> str:
    return response.json()["error"]["code"]


# ==============================================================================
# Health
# ==============================================================================


async def test_liveness(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_readiness_with_database(client):
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    from reviewer_service.infrastructure import database
    monkeypatch.setattr(database, "db_manager", None)

    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"


# ==============================================================================
# Teams
# ==============================================================================


async def test_add_team_returns_members(team_backend):
    assert team_backend["team_name"] == "backend"
    assert [m["user_id"] for m in team_backend["members"]] == ["u1", "u2", "u3", "u4"]
    assert team_backend["members"][3]["is_active"] is False


async def test_add_existing_team_is_rejected(client, team_backend):
    response = await client.post("/team/add", json={
        "team_name": "backend",
        "members": [{"user_id": "x1", "username": "X", "is_active": True}],
    })
    assert response.status_code == 400
    assert _error_code(response) == "TEAM_EXISTS"


async def test_add_team_with_taken_user_is_conflict(client, team_backend):
    response = await client.post("/team/add", json={
        "team_name": "frontend",
        "members": [{"user_id": "u1", "username": "Alice", "is_active": True}],
    })
    assert response.status_code == 409
    assert _error_code(response) == "USER_EXISTS"

    missing = await client.get("/team/get", params={"team_name": "frontend"})
    assert missing.status_code == 404


async def test_add_team_rejects_duplicate_member_ids(client):
    response = await client.post("/team/add", json={
        "team_name": "dup",
        "members": [
            {"user_id": "d1", "username": "A", "is_active": True},
            {"user_id": "d1", "username": "B", "is_active": True},
        ],
    })
    assert response.status_code == 400
    assert _error_code(response) == "BAD_REQUEST"


async def test_add_team_rejects_blank_name(client):
    response = await client.post("/team/add", json={"team_name": "   ", "members": []})
    assert response.status_code == 400
    assert response.json()["error"]["details"]


async def test_get_team(client, team_backend):
    response = await client.get("/team/get", params={"team_name": "backend"})
    assert response.status_code == 200
    assert response.json() == team_backend


async def test_get_unknown_team(client):
    response = await client.get("/team/get", params={"team_name": "ghost"})
    assert response.status_code == 404
    assert _error_code(response) == "NOT_FOUND"


async def test_get_team_requires_name(client):
    response = await client.get("/team/get")
    assert response.status_code == 400


async def test_get_team_strips_query_like_body(client):
    created = await client.post("/team/add", json={
        "team_name": " padded ",
        "members": [{"user_id": "p1", "username": "Pat", "is_active": True}],
    })
    assert created.json()["team"]["team_name"] == "padded"

    response = await client.get("/team/get", params={"team_name": " padded"})

    assert response.status_code == 200
    assert response.json()["team_name"] == "padded"


async def test_get_team_rejects_whitespace_name(client):
    response = await client.get("/team/get", params={"team_name": "   "})
    assert response.status_code == 400
    assert _error_code(response) == "BAD_REQUEST"
    assert response.json()["error"]["details"][0]["field"] == "query.team_name"


# ==============================================================================
# Users
# ==============================================================================


async def test_set_is_active(client, team_backend):
    response = await client.post(
        "/users/setIsActive", json={"user_id": "u2", "is_active": False},
    )
    assert response.status_code == 200
    assert response.json()["user"] == {
        "user_id": "u2", "username": "Bob", "team_name": "backend", "is_active": False,
    }


async def test_set_is_active_unknown_user(client):
    response = await client.post(
        "/users/setIsActive", json={"user_id": "ghost", "is_active": True},
    )
    assert response.status_code == 404
    assert _error_code(response) == "NOT_FOUND"


async def test_get_review_lists_short_pull_requests(client, team_backend):
    await client.post("/pullRequest/create", json={
        "pull_request_id": "pr-1", "pull_request_name": "Add search", "author_id": "u1",
    })

    response = await client.get("/users/getReview", params={"user_id": "u2"})

    assert response.status_code == 200
    assert response.json() == {
        "user_id": "u2",
        "pull_requests": [{
            "pull_request_id": "pr-1",
            "pull_request_name": "Add search",
            "author_id": "u1",
            "status": "OPEN",
        }],
    }


async def test_get_review_strips_user_id(client, team_backend):
    response = await client.get("/users/getReview", params={"user_id": " u2 "})
    assert response.status_code == 200
    assert response.json() == {"user_id": "u2", "pull_requests": []}


async def test_get_review_rejects_whitespace_user_id(client):
    response = await client.get("/users/getReview", params={"user_id": " "})
    assert response.status_code == 400
    assert _error_code(response) == "BAD_REQUEST"


async def test_get_review_unknown_user(client):
    response = await client.get("/users/getReview", params={"user_id": "ghost"})
    assert response.status_code == 404


# ==============================================================================
# Pull requests
# ==============================================================================


async def _create(client, pr_id="pr-1", author="u1"):
    return await client.post("/pullRequest/create", json={
        "pull_request_id": pr_id, "pull_request_name": "Add search", "author_id": author,
    })


async def test_create_pull_request(client, team_backend):
    response = await _create(client)

    assert response.status_code == 201
    pr = response.json()["pr"]
    assert pr["status"] == "OPEN"
    assert sorted(pr["assigned_reviewers"]) == ["u2", "u3"]
    assert "createdAt" in pr
    assert "mergedAt" not in pr


async def test_create_duplicate_pull_request(client, team_backend):
    await _create(client)
    response = await _create(client)
    assert response.status_code == 409
    assert _error_code(response) == "PR_EXISTS"


async def test_create_with_unknown_author(client):
    response = await _create(client, author="ghost")
    assert response.status_code == 404
    assert _error_code(response) == "NOT_FOUND"


async def test_create_rejects_missing_fields(client):
    response = await client.post("/pullRequest/create", json={"pull_request_id": "x"})
    assert response.status_code == 400
    assert _error_code(response) == "BAD_REQUEST"


async def test_merge_is_idempotent(client, team_backend):
    await _create(client)

    first = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})
    second = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["pr"]["status"] == "MERGED"
    assert first.json()["pr"]["mergedAt"] == second.json()["pr"]["mergedAt"]


async def test_merge_unknown_pull_request(client):
    response = await client.post("/pullRequest/merge", json={"pull_request_id": "nope"})
    assert response.status_code == 404


async def test_reassign_after_merge_fails(client, team_backend):
    await _create(client)
    await client.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    response = await client.post("/pullRequest/reassign", json={
        "pull_request_id": "pr-1", "old_user_id": "u2",
    })

    assert response.status_code == 409
    assert _error_code(response) == "PR_MERGED"


async def test_reassign_unassigned_reviewer(client, team_backend):
    await _create(client)

    response = await client.post("/pullRequest/reassign", json={
        "pull_request_id": "pr-1", "old_user_id": "u4",
    })

    assert response.status_code == 409
    assert _error_code(response) == "NOT_ASSIGNED"


async def test_reassign_without_candidate(client, team_backend):
    await _create(client)

    response = await client.post("/pullRequest/reassign", json={
        "pull_request_id": "pr-1", "old_user_id": "u2",
    })

    assert response.status_code == 409
    assert _error_code(response) == "NO_CANDIDATE"


async def test_reassign_picks_reactivated_teammate(client, team_backend):
    await _create(client)
    await client.post("/users/setIsActive", json={"user_id": "u4", "is_active": True})

    response = await client.post("/pullRequest/reassign", json={
        "pull_request_id": "pr-1", "old_user_id": "u2",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["replaced_by"] == "u4"
    assert sorted(body["pr"]["assigned_reviewers"]) == ["u3", "u4"]
