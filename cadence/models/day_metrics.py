from sqlalchemy import Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from cadence.db.base import Base


class DayMetrics(Base):
    """Aggregated hour/count totals for a single Day (one-to-one)."""

    __tablename__ = "metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    day_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    productive_hours: Mapped[float] = mapped_column(
        Numeric(8, 4, asdecimal=False), nullable=False, default=0
    )
    neutral_hours: Mapped[float] = mapped_column(
        Numeric(8, 4, asdecimal=False), nullable=False, default=0
    )
    wasted_hours: Mapped[float] = mapped_column(
        Numeric(8, 4, asdecimal=False), nullable=False, default=0
    )
    sleep_hours: Mapped[float] = mapped_column(
        Numeric(8, 4, asdecimal=False), nullable=False, default=0
    )
    focus_blocks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    context_switches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
