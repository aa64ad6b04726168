"""
Accounting period model.

One row per (company, year, month). State changes belong to
period management, which lives outside this package; the
posting core only reads it.
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from gl_core.models.base import Base
from gl_core.models.enums import PeriodState


class Period(Base):
    __tablename__ = "periods"

    company_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, primary_key=True)
    state: Mapped[PeriodState] = mapped_column(
        SAEnum(
            PeriodState,
            name="period_state_enum",
            values_callable=lambda e: [m.value for m in e],
            create_constraint=True,
        ),
        nullable=False,
        default=PeriodState.OPEN,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )
    updated_by: Mapped[str] = mapped_column(
        String(100), nullable=False, default="system"
    )

    def __repr__(self) -> str:
        return (
            f"<Period {self.company_id} "
            f"{self.year}-{self.month:02d} ({self.state.value})>"
        )
