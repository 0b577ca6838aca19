"""HTTP tests for catalog, moderation and GitHub import routes."""

import pytest

SUBMISSION = {
    "app_id": "demo",
    "name": "Demo",
    "developer": "Acme",
    "description": "Demo application",
    "category": "Utilities",
    "version": "1.0",
    "release_date": "2024-03-01",
    "assets": [
        {"platform": "windows", "download_url": "https://dl.example.com/demo.exe"},
        {"platform": "web", "download_url": "https://demo.example.com", "price": 1.5},
    ],
}


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "appcatalog-api"
    assert "X-Trace-Id" in response.headers


@pytest.mark.asyncio
async def test_readiness(client):
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "ok"


@pytest.mark.asyncio
async def test_platforms_listed(client):
    response = await client.get("/api/v1/platforms")
    assert response.status_code == 200
    assert [p["name"] for p in response.json()][:3] == ["windows", "macos", "linux"]


@pytest.mark.asyncio
async def test_submission_requires_authentication(client):
    response = await client.post("/api/v1/apps/submissions", json=SUBMISSION)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client):
    response = await client.post(
        "/api/v1/apps/submissions",
        json=SUBMISSION,
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_submission_requires_developer(client, users, make_token):
    headers = {"Authorization": f"Bearer {make_token('usr_plain')}"}
    response = await client.post("/api/v1/apps/submissions", json=SUBMISSION, headers=headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_submit_and_conflict(client, developer_headers):
    response = await client.post("/api/v1/apps/submissions", json=SUBMISSION, headers=developer_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["app_created"] is True
    assert body["app"]["approval_status"] == "PENDING"
    assert body["app"]["submitted_by"] == "usr_dev"
    assert body["version"]["version"] == "1.0"
    assert len(body["platform_support"]) == 2

    again = await client.post("/api/v1/apps/submissions", json=SUBMISSION, headers=developer_headers)
    assert again.status_code == 409
    error = again.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["trace_id"] == again.headers["X-Trace-Id"]


@pytest.mark.asyncio
async def test_malformed_date_is_validation_error(client, developer_headers):
    payload = {**SUBMISSION, "release_date": "03/01/2024"}
    response = await client.post("/api/v1/apps/submissions", json=payload, headers=developer_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_app_and_version_lifecycle(client, developer_headers):
    app = {
        "app_id": "notes",
        "name": "Notes",
        "developer": "Acme",
        "description": "Notes app",
        "category": "Productivity",
    }
    assert (await client.post("/api/v1/apps", json=app, headers=developer_headers)).status_code == 201

    updated = await client.put("/api/v1/apps/notes", json={"is_featured": True}, headers=developer_headers)
    assert updated.status_code == 200
    assert updated.json()["is_featured"] is True
    assert updated.json()["name"] == "Notes"
    assert (await client.get("/api/v1/apps/notes")).json()["is_featured"] is True

    version = await client.post(
        "/api/v1/apps/notes/versions", json={"version": "2.0"}, headers=developer_headers,
    )
    assert version.status_code == 201
    version_id = version.json()["id"]

    platforms = (await client.get("/api/v1/platforms")).json()
    linux = next(p["id"] for p in platforms if p["name"] == "linux")
    offering = await client.post(
        f"/api/v1/apps/notes/versions/{version_id}/platforms",
        json={"platform_id": linux, "download_url": "https://dl.example.com/notes.deb"},
        headers=developer_headers,
    )
    assert offering.status_code == 201

    versions = await client.get("/api/v1/apps/notes/versions")
    assert [v["version"] for v in versions.json()] == ["2.0"]
    assert len((await client.get("/api/v1/apps/notes/platforms")).json()) == 1
    assert (await client.get("/api/v1/apps/categories")).json() == ["Productivity"]

    deleted = await client.delete("/api/v1/apps/notes", headers=developer_headers)
    assert deleted.status_code == 200
    assert (await client.delete("/api/v1/apps/notes", headers=developer_headers)).status_code == 404
    assert (await client.get("/api/v1/apps/notes/versions")).status_code == 404


@pytest.mark.asyncio
async def test_moderation_flow(client, developer_headers, moderator_headers):
    body = (await client.post("/api/v1/apps/submissions", json=SUBMISSION, headers=developer_headers)).json()
    version_id = body["version"]["id"]

    pending = await client.get("/api/v1/moderation/pending-apps", headers=moderator_headers)
    assert [a["app_id"] for a in pending.json()] == ["demo"]

    forbidden = await client.post("/api/v1/apps/demo/approve", headers=developer_headers)
    assert forbidden.status_code == 403

    rejected = await client.post(
        "/api/v1/apps/demo/reject", json={"notes": "needs screenshots"}, headers=moderator_headers,
    )
    assert rejected.status_code == 200
    approved = await client.post("/api/v1/apps/demo/approve", headers=moderator_headers)
    assert approved.json()["approval_status"] == "APPROVED"

    version = await client.post(
        f"/api/v1/apps/demo/versions/{version_id}/approve", headers=moderator_headers,
    )
    assert version.status_code == 200

    history = (await client.get("/api/v1/apps/demo/approval-history", headers=moderator_headers)).json()
    assert [h["status"] for h in history] == ["APPROVED", "APPROVED", "REJECTED"]
    assert history[-1]["review_notes"] == "needs screenshots"
    assert history[-1]["reviewer_name"] == "morgan"

    version_history = await client.get(
        f"/api/v1/apps/demo/versions/{version_id}/approval-history", headers=moderator_headers,
    )
    assert len(version_history.json()) == 1

    assert (await client.get("/api/v1/moderation/pending-apps", headers=moderator_headers)).json() == []
    assert (await client.get("/api/v1/moderation/pending-versions", headers=moderator_headers)).json() == []


@pytest.mark.asyncio
async def test_decision_on_missing_target(client, moderator_headers):
    response = await client.post("/api/v1/apps/ghost/approve", headers=moderator_headers)
    assert response.status_code == 404
    response = await client.post("/api/v1/apps/ghost/versions/3/reject", headers=moderator_headers)
    assert response.status_code == 404
    history = await client.get("/api/v1/apps/ghost/approval-history", headers=moderator_headers)
    assert history.status_code == 404


@pytest.mark.asyncio
async def test_github_import_routes(client, developer_headers):
    preview = await client.get(
        "/api/v1/github/repositories/acme/tool/releases/v1.2.0", headers=developer_headers,
    )
    assert preview.status_code == 200
    assert list(preview.json()["platforms"]) == ["windows"]

    imported = await client.post(
        "/api/v1/apps/tool/github/import",
        json={
            "repo_owner": "acme",
            "repo_name": "tool",
            "release_tag": "v1.2.0",
            "app_name": "Tool",
            "app_description": "A handy tool",
            "app_category": "Developer Tools",
        },
        headers=developer_headers,
    )
    assert imported.status_code == 201
    assert imported.json()["app"]["source_repository"] == "acme/tool"

    again = await client.put(
        "/api/v1/apps/tool/github/update",
        json={"repo_owner": "acme", "repo_name": "tool", "release_tag": "v1.2.0"},
        headers=developer_headers,
    )
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_github_provider_errors_surface(client, developer_headers, fake_github):
    missing = await client.get("/api/v1/github/repositories/acme/nope/releases", headers=developer_headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "REPOSITORY_NOT_FOUND"

    import httpx

    fake_github.forced = httpx.Response(401)
    denied = await client.get("/api/v1/github/repositories/acme/tool/releases", headers=developer_headers)
    assert denied.status_code == 502
    assert denied.json()["error"]["code"] == "PROVIDER_AUTH_FAILED"
