"""
Day: one row per (owner, calendar date).

transcript / suggestions: JSON-encoded lists stored as Text (stdlib json).
The transcript list is append-only: every recap submitted for the date is
kept, oldest first.
"""
import datetime as dt
from sqlalchemy import Integer, String, Text, DateTime, Date, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base


class Day(Base):
    __tablename__ = "days"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_day_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    transcript: Mapped[str] = mapped_column(
        Text, nullable=False, default="[]",
        comment="JSON array of raw recap submissions, oldest first",
    )
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    suggestions: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON array of suggestion strings",
    )
    metrics_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
