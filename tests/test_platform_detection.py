"""Release asset to platform heuristic tests."""

import pytest

from appcatalog.models.enums import PlatformName
from appcatalog.models.github import GithubReleaseAsset
from appcatalog.services.platform_detection import detect_platform, map_assets


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("tool-setup.exe", PlatformName.WINDOWS),
        ("Tool-1.2.0-x64.MSI", PlatformName.WINDOWS),
        ("Tool.dmg", PlatformName.MACOS),
        ("tool_1.2.0_amd64.deb", PlatformName.LINUX),
        ("Tool-x86_64.AppImage", PlatformName.LINUX),
        ("tool-release.apk", PlatformName.ANDROID),
        ("Tool.ipa", PlatformName.IOS),
        ("tool-linux-x64.tar.gz", PlatformName.LINUX),
        ("tool-darwin-arm64.zip", PlatformName.MACOS),
        ("tool-android-linux-arm64.tar.gz", PlatformName.ANDROID),
        ("tool-win64.zip", PlatformName.WINDOWS),
    ],
)
def test_detect_platform(file_name, expected):
    assert detect_platform(file_name) == expected


@pytest.mark.parametrize(
    "file_name",
    ["readme.txt", "CHANGELOG.md", "tool-setup.exe.sha256", "tool.dmg.asc", "source.tar.gz", "latest.json"],
)
def test_unrecognised_or_ignored(file_name):
    assert detect_platform(file_name) is None


def test_label_breaks_tie():
    assert detect_platform("tool-1.2.0.zip", label="Windows installer") == PlatformName.WINDOWS


def test_map_assets_first_per_platform_wins():
    assets = [
        GithubReleaseAsset(id=1, name="tool-setup.exe", browser_download_url="https://x/1"),
        GithubReleaseAsset(id=2, name="tool-portable-win64.zip", browser_download_url="https://x/2"),
        GithubReleaseAsset(id=3, name="readme.txt", browser_download_url="https://x/3"),
        GithubReleaseAsset(id=4, name="tool.deb", browser_download_url="https://x/4"),
    ]
    mapped, unmapped = map_assets(assets)
    assert set(mapped) == {PlatformName.WINDOWS, PlatformName.LINUX}
    assert mapped[PlatformName.WINDOWS].id == 1
    assert unmapped == ["tool-portable-win64.zip", "readme.txt"]


def test_readme_next_to_installer():
    assets = [
        GithubReleaseAsset(id=1, name="app-windows.exe", browser_download_url="https://x/1"),
        GithubReleaseAsset(id=2, name="app-readme.txt", browser_download_url="https://x/2"),
    ]
    mapped, unmapped = map_assets(assets)
    assert list(mapped) == [PlatformName.WINDOWS]
    assert unmapped == ["app-readme.txt"]
