"""Reference data seeded once at schema bootstrap."""

from appcatalog.models.enums import PlatformName
from appcatalog.repositories.platform_repo import PlatformRepository

DEFAULT_PLATFORMS: list[tuple[str, str]] = [
    (PlatformName.WINDOWS, "Windows"),
    (PlatformName.MACOS, "macOS"),
    (PlatformName.LINUX, "Linux"),
    (PlatformName.ANDROID, "Android"),
    (PlatformName.IOS, "iOS"),
    (PlatformName.WEB, "Web"),
]


async def seed_platforms(session) -> int:
    """Seed the fixed platform set (idempotent).

    Returns the number of platforms created (0 if already present).
    """
    repo = PlatformRepository(session)
    created = 0

    for name, display_name in DEFAULT_PLATFORMS:
        existing = await repo.get_by_name(str(name))
        if not existing:
            await repo.create(name=str(name), display_name=display_name)
            created += 1

    return created
