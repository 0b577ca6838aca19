"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from appcatalog.config import settings
from appcatalog.db.engine import Database
from appcatalog.db.models.user import GithubTokenRow, UserRow
from appcatalog.integrations.github_releases import GitHubReleaseClient
from appcatalog.models.catalog import AppCreate, Submission
from appcatalog.services.approval import ApprovalStateMachine
from appcatalog.services.catalog_store import CatalogStore
from appcatalog.services.credentials import GithubCredentialStore
from appcatalog.services.release_importer import ReleaseImporter
from appcatalog.services.submission import SubmissionCoordinator


@pytest.fixture
async def db():
    """In-memory SQLite catalog with the platform set seeded."""
    database = Database("sqlite+aiosqlite:///")
    await database.open(create_schema=True)
    yield database
    await database.close()


@pytest.fixture
async def file_db(tmp_path):
    """File-backed SQLite catalog; each session gets its own connection."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await database.open(create_schema=True)
    yield database
    await database.close()


@pytest.fixture
def store(db):
    return CatalogStore(db)


@pytest.fixture
def coordinator(db, store):
    return SubmissionCoordinator(db, store)


@pytest.fixture
def machine(db):
    return ApprovalStateMachine(db)


@pytest.fixture
async def users(db):
    """A developer with a linked GitHub token, a moderator, and a developer without one."""
    async with db.session() as session:
        session.add_all([
            UserRow(user_id="usr_dev", username="devon", email="dev@example.com", is_developer=True),
            UserRow(user_id="usr_mod", username="morgan", email="mod@example.com", is_admin=True),
            UserRow(user_id="usr_nogh", username="nogh", email="nogh@example.com", is_developer=True),
        ])
        await session.flush()
        session.add(GithubTokenRow(user_id="usr_dev", access_token="gho_test_token"))
        await session.commit()
    return {"developer": "usr_dev", "moderator": "usr_mod", "unlinked": "usr_nogh"}


def _app_spec(app_id: str = "notes-app", **overrides) -> AppCreate:
    data = {
        "app_id": app_id,
        "name": "Notes",
        "developer": "Acme",
        "description": "Take notes everywhere",
        "category": "Productivity",
    }
    data.update(overrides)
    return AppCreate(**data)


def _submission(app_id: str | None = "demo", version: str = "1.0", assets=None, **overrides) -> Submission:
    data = {
        "app_id": app_id,
        "name": "Demo",
        "developer": "Acme",
        "description": "Demo application",
        "category": "Utilities",
        "version": version,
        "release_date": "2024-03-01",
        "assets": assets if assets is not None else [
            {"platform": "windows", "download_url": "https://dl.example.com/demo.exe"},
            {"platform": "linux", "download_url": "https://dl.example.com/demo.deb"},
        ],
    }
    data.update(overrides)
    return Submission(**data)


@pytest.fixture
def app_spec():
    """Factory for AppCreate payloads."""
    return _app_spec


@pytest.fixture
def submission():
    """Factory for Submission payloads (two assets by default)."""
    return _submission


# ── Fake GitHub ────────────────────────────────────────────────────────────────

def _github_asset(asset_id: int, name: str, size: int = 1000, label: str | None = None) -> dict:
    return {
        "id": asset_id,
        "name": name,
        "label": label,
        "size": size,
        "download_count": 3,
        "browser_download_url": f"https://github.com/acme/tool/releases/download/v1.2.0/{name}",
    }


def _github_release(tag: str = "v1.2.0", assets: list[dict] | None = None, **overrides) -> dict:
    data = {
        "id": 501,
        "tag_name": tag,
        "name": f"Tool {tag}",
        "body": "Bug fixes and improvements",
        "draft": False,
        "prerelease": False,
        "created_at": "2024-05-01T10:00:00Z",
        "published_at": "2024-05-02T12:30:00Z",
        "assets": assets if assets is not None else [
            _github_asset(1, "tool-setup.exe", size=4000),
            _github_asset(2, "readme.txt", size=10),
        ],
    }
    data.update(overrides)
    return data


class FakeGitHub:
    """Routes GitHub REST paths to canned responses for httpx.MockTransport."""

    def __init__(self):
        self.repositories = {
            ("acme", "tool"): {
                "id": 77,
                "name": "tool",
                "full_name": "acme/tool",
                "owner": {"login": "acme"},
                "description": "A tool",
            },
        }
        self.releases = {("acme", "tool"): [_github_release()]}
        self.forced: httpx.Response | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.forced is not None:
            return self.forced

        parts = request.url.path.strip("/").split("/")
        if len(parts) < 3 or parts[0] != "repos":
            return httpx.Response(404, json={"message": "Not Found"})
        key = (parts[1], parts[2])
        if key not in self.repositories:
            return httpx.Response(404, json={"message": "Not Found"})
        if len(parts) == 3:
            return httpx.Response(200, json=self.repositories[key])
        releases = self.releases.get(key, [])
        if parts[3:] == ["releases"]:
            return httpx.Response(200, json=releases)
        if parts[3:5] == ["releases", "tags"] and len(parts) == 6:
            for release in releases:
                if release["tag_name"] == parts[5]:
                    return httpx.Response(200, json=release)
        return httpx.Response(404, json={"message": "Not Found"})


@pytest.fixture
def github_asset():
    return _github_asset


@pytest.fixture
def github_release():
    return _github_release


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def release_client(fake_github):
    return GitHubReleaseClient(
        base_url="https://api.github.test",
        transport=httpx.MockTransport(fake_github.handler),
    )


@pytest.fixture
def importer(db, store, coordinator, release_client):
    return ReleaseImporter(store, coordinator, release_client, GithubCredentialStore(db))


# ── HTTP ───────────────────────────────────────────────────────────────────────

def _make_token(sub: str, is_developer: bool = False, is_admin: bool = False, **claims) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "is_developer": is_developer,
        "is_admin": is_admin,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=30)).timestamp()),
        "type": "access",
    }
    payload.update(claims)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def make_token():
    """Factory minting access tokens the auth middleware accepts."""
    return _make_token


@pytest.fixture
def developer_headers(users):
    return {"Authorization": f"Bearer {_make_token(users['developer'], is_developer=True)}"}


@pytest.fixture
def moderator_headers(users):
    return {"Authorization": f"Bearer {_make_token(users['moderator'], is_admin=True)}"}


@pytest.fixture
def app(db, release_client):
    """Test application wired to the in-memory catalog and fake GitHub."""
    from appcatalog.main import attach_services, create_app

    _app = create_app()
    attach_services(_app, db, release_client=release_client)
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
