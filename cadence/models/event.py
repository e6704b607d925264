from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from cadence.db.base import Base


class EventCategory(str, enum.Enum):
    productive = "productive"
    neutral = "neutral"
    waste = "waste"
    sleep = "sleep"
    untracked = "untracked"


class Event(Base):
    """
    A labeled time block within a Day. start_time / end_time are "HH:MM"
    wall-clock strings on the owning Day's date.

    carryover_minutes is set only on synthetic markers written by the
    cross-day patcher: the sleep minutes the marker added to its Day.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    day_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    label: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[str] = mapped_column(
        Enum(EventCategory, name="event_category_enum"),
        nullable=False,
        default=EventCategory.untracked,
    )
    start_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    carryover_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
