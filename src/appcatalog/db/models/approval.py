"""Append-only approval ledger."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from appcatalog.db.base import Base, utcnow


class ApprovalRecordRow(Base):
    """One moderation decision. Rows are inserted, never updated or deleted.

    ``app_id`` / ``version_id`` carry no foreign keys so the audit trail
    survives deletion of the app it describes.
    """

    __tablename__ = "app_approval_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    app_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    version_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    reviewed_by: Mapped[str] = mapped_column(String(128), nullable=False)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    decided_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
