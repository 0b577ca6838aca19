"""SubmissionCoordinator tests: app reuse, offerings and all-or-nothing commits."""

import pytest
from sqlalchemy import delete

from appcatalog.db.models.catalog import PlatformRow
from appcatalog.models.enums import ApprovalStatus
from appcatalog.models.results import Conflict, NotFound, SubmissionResult


@pytest.mark.asyncio
async def test_submit_new_app(coordinator, store, submission):
    result = await coordinator.submit(submission(), actor_id="usr_dev")

    assert isinstance(result, SubmissionResult)
    assert result.app_created is True
    assert result.app.app_id == "demo"
    assert result.app.approval_status == ApprovalStatus.PENDING
    assert result.version.version == "1.0"
    assert result.version.submitted_by == "usr_dev"
    assert len(result.platform_support) == 2
    assert {row.version_id for row in result.platform_support} == {result.version.id}


@pytest.mark.asyncio
async def test_submit_new_version_reuses_app(coordinator, store, submission):
    await coordinator.submit(submission(version="1.0"), actor_id="usr_dev")
    result = await coordinator.submit(submission(version="1.1"), actor_id="usr_dev")

    assert result.app_created is False
    versions = await store.list_versions("demo")
    assert sorted(v.version for v in versions) == ["1.0", "1.1"]
    assert len(await store.list_platform_support("demo")) == 4


@pytest.mark.asyncio
async def test_resubmitting_same_version_conflicts(coordinator, store, submission):
    await coordinator.submit(submission(version="1.0"), actor_id="usr_dev")

    outcome = await coordinator.submit(submission(version="1.0"), actor_id="usr_dev")
    assert outcome == Conflict("Version", "demo@1.0")
    assert len(await store.list_versions("demo")) == 1
    assert len(await store.list_platform_support("demo")) == 2


@pytest.mark.asyncio
async def test_failed_submission_leaves_app_untouched(coordinator, store, submission):
    await coordinator.submit(submission(source_repository="acme/demo"), actor_id="usr_dev")

    outcome = await coordinator.submit(
        submission(source_repository="acme/demo-next"), actor_id="usr_dev",
    )
    assert isinstance(outcome, Conflict)
    app = await store.get_app("demo")
    assert app.source_repository == "acme/demo"


@pytest.mark.asyncio
async def test_failed_submission_does_not_create_app(db, coordinator, store, submission):
    async with db.session() as session:
        await session.execute(delete(PlatformRow).where(PlatformRow.name == "web"))
        await session.commit()

    outcome = await coordinator.submit(
        submission(
            app_id="webby",
            assets=[
                {"platform": "linux", "download_url": "https://dl.example.com/webby.deb"},
                {"platform": "web", "download_url": "https://webby.example.com"},
            ],
        ),
        actor_id="usr_dev",
    )
    assert outcome == NotFound("Platform", "web")
    assert isinstance(await store.get_app("webby"), NotFound)
    assert await store.list_platform_support("webby") == []


@pytest.mark.asyncio
async def test_repeated_platform_in_one_submission_keeps_last_url(coordinator, store, submission):
    result = await coordinator.submit(
        submission(
            assets=[
                {"platform": "android", "download_url": "https://dl.example.com/a1.apk"},
                {"platform": "android", "download_url": "https://dl.example.com/a2.apk"},
            ],
        ),
        actor_id="usr_dev",
    )
    assert len(result.platform_support) == 1
    assert result.platform_support[0].download_url == "https://dl.example.com/a2.apk"


@pytest.mark.asyncio
async def test_missing_app_id_is_generated(coordinator, submission):
    result = await coordinator.submit(submission(app_id=None, name="My Cool App!"), actor_id="usr_dev")
    assert result.app_created is True
    assert result.app.app_id.startswith("my-cool-app_")


@pytest.mark.asyncio
async def test_submission_without_assets(coordinator, submission):
    result = await coordinator.submit(submission(assets=[]), actor_id=None)
    assert result.platform_support == []
    assert result.app.submitted_by is None


@pytest.mark.asyncio
async def test_single_windows_asset_then_resubmit(coordinator, store, submission):
    windows_only = [{"platform": "windows", "download_url": "https://dl.example.com/demo.exe"}]
    result = await coordinator.submit(submission(assets=windows_only), actor_id="usr_dev")
    assert result.app.approval_status == ApprovalStatus.PENDING
    assert len(result.platform_support) == 1

    outcome = await coordinator.submit(submission(assets=windows_only), actor_id="usr_dev")
    assert isinstance(outcome, Conflict)
    assert len(await store.list_versions("demo")) == 1
    assert len(await store.list_platform_support("demo")) == 1
