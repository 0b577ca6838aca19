"""Filename/label heuristic mapping release assets to catalog platforms."""

from __future__ import annotations

import logging
import re

from appcatalog.models.enums import PlatformName
from appcatalog.models.github import GithubReleaseAsset

logger = logging.getLogger(__name__)

# Checksums, signatures and docs ship alongside binaries but are not installable
_IGNORED_SUFFIXES = (".sha256", ".sha512", ".sha1", ".md5", ".asc", ".sig", ".txt", ".md", ".json")

_EXTENSIONS: dict[str, PlatformName] = {
    ".exe": PlatformName.WINDOWS,
    ".msi": PlatformName.WINDOWS,
    ".msix": PlatformName.WINDOWS,
    ".appx": PlatformName.WINDOWS,
    ".dmg": PlatformName.MACOS,
    ".pkg": PlatformName.MACOS,
    ".deb": PlatformName.LINUX,
    ".rpm": PlatformName.LINUX,
    ".appimage": PlatformName.LINUX,
    ".snap": PlatformName.LINUX,
    ".flatpak": PlatformName.LINUX,
    ".apk": PlatformName.ANDROID,
    ".aab": PlatformName.ANDROID,
    ".ipa": PlatformName.IOS,
}

# Checked in order; android before linux since android builds often say both
_KEYWORDS: list[tuple[PlatformName, frozenset[str]]] = [
    (PlatformName.ANDROID, frozenset({"android"})),
    (PlatformName.IOS, frozenset({"ios", "iphone", "ipad"})),
    (PlatformName.WINDOWS, frozenset({"windows", "win", "win32", "win64"})),
    (PlatformName.MACOS, frozenset({"macos", "mac", "darwin", "osx"})),
    (PlatformName.LINUX, frozenset({"linux", "ubuntu", "debian", "fedora"})),
]


def detect_platform(file_name: str, label: str | None = None) -> PlatformName | None:
    """Return the platform an asset targets, or None if it cannot be told."""
    name = file_name.lower()
    if name.endswith(_IGNORED_SUFFIXES):
        return None

    for extension, platform in _EXTENSIONS.items():
        if name.endswith(extension):
            return platform

    tokens = set(re.split(r"[^a-z0-9]+", f"{name} {(label or '').lower()}"))
    for platform, keywords in _KEYWORDS:
        if tokens & keywords:
            return platform
    return None


def map_assets(
    assets: list[GithubReleaseAsset],
) -> tuple[dict[PlatformName, GithubReleaseAsset], list[str]]:
    """Split release assets into one asset per platform plus the leftovers.

    The first asset seen for a platform wins; later ones for the same
    platform and unrecognised files are returned as unmapped names.
    """
    mapped: dict[PlatformName, GithubReleaseAsset] = {}
    unmapped: list[str] = []
    for asset in assets:
        platform = detect_platform(asset.name, asset.label)
        if platform is None or platform in mapped:
            unmapped.append(asset.name)
            continue
        mapped[platform] = asset

    if unmapped:
        logger.debug("Dropped %d unmapped release assets: %s", len(unmapped), unmapped)
    return mapped, unmapped
