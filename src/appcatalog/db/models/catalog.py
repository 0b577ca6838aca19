"""App, version, platform and platform-support tables."""

from datetime import date

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from appcatalog.db.base import Base, TimestampMixin
from appcatalog.models.enums import ApprovalStatus


class AppRow(Base, TimestampMixin):
    __tablename__ = "apps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    developer: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    approval_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApprovalStatus.PENDING, index=True
    )
    # Nullable for legacy and admin-created rows
    submitted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    source_repository: Mapped[str | None] = mapped_column(String(255), nullable=True)


class AppVersionRow(Base):
    __tablename__ = "app_versions"
    __table_args__ = (UniqueConstraint("app_id", "version", name="uq_app_versions_app_version"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[str] = mapped_column(String(100), ForeignKey("apps.app_id"), nullable=False, index=True)
    version: Mapped[str] = mapped_column(String(50), nullable=False)
    release_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    min_os_version: Mapped[str | None] = mapped_column(String(50), nullable=True)
    size_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    approval_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApprovalStatus.PENDING, index=True
    )
    submitted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)


class PlatformRow(Base):
    __tablename__ = "platforms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)


class PlatformSupportRow(Base):
    __tablename__ = "app_platform_support"
    __table_args__ = (
        UniqueConstraint("app_id", "platform_id", "version_id", name="uq_platform_support_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[str] = mapped_column(String(100), ForeignKey("apps.app_id"), nullable=False, index=True)
    platform_id: Mapped[int] = mapped_column(Integer, ForeignKey("platforms.id"), nullable=False)
    version_id: Mapped[int] = mapped_column(Integer, ForeignKey("app_versions.id"), nullable=False, index=True)
    download_url: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0.0)
