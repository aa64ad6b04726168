"""
FX models: admin rates, gain/loss mappings and revaluation runs.

FxRevalLock is the guard against double adjustment: its primary
key is (company, year, month, account, currency), so a balance
can be revalued by at most one committed run per period.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Integer, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gl_core.models.base import Base
from gl_core.models.enums import RevalMode


class FxAdminRate(Base):
    """Administrator-maintained rate: 1 src_ccy = rate dst_ccy."""

    __tablename__ = "fx_admin_rates"

    company_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    as_of_date: Mapped[date] = mapped_column(Date, primary_key=True)
    src_ccy: Mapped[str] = mapped_column(String(3), primary_key=True)
    dst_ccy: Mapped[str] = mapped_column(String(3), primary_key=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(20, 10), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_by: Mapped[str] = mapped_column(
        String(100), nullable=False, default="system"
    )


class FxAccountMap(Base):
    """Unrealized gain/loss accounts for a monetary account."""

    __tablename__ = "fx_account_map"

    company_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    gl_account: Mapped[str] = mapped_column(String(40), primary_key=True)
    unreal_gain_account: Mapped[str] = mapped_column(
        String(40), nullable=False
    )
    unreal_loss_account: Mapped[str] = mapped_column(
        String(40), nullable=False
    )


class FxRevalRun(Base):
    __tablename__ = "fx_reval_run"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    mode: Mapped[RevalMode] = mapped_column(
        SAEnum(
            RevalMode,
            name="reval_mode_enum",
            values_callable=lambda e: [m.value for m in e],
            create_constraint=True,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)

    lines: Mapped[list["FxRevalLine"]] = relationship(back_populates="run")


class FxRevalLine(Base):
    """Computed adjustment for one (account, currency) balance."""

    __tablename__ = "fx_reval_line"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    run_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("fx_reval_run.id"), nullable=False, index=True
    )
    gl_account: Mapped[str] = mapped_column(String(40), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    balance_base: Mapped[Decimal] = mapped_column(
        Numeric(20, 6), nullable=False
    )
    balance_src: Mapped[Decimal] = mapped_column(
        Numeric(20, 6), nullable=False
    )
    rate_old: Mapped[Decimal] = mapped_column(Numeric(20, 10), nullable=False)
    rate_new: Mapped[Decimal] = mapped_column(Numeric(20, 10), nullable=False)
    delta_base: Mapped[Decimal] = mapped_column(
        Numeric(20, 2), nullable=False
    )

    run: Mapped["FxRevalRun"] = relationship(back_populates="lines")


class FxRevalLock(Base):
    __tablename__ = "fx_reval_lock"

    company_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, primary_key=True)
    gl_account: Mapped[str] = mapped_column(String(40), primary_key=True)
    currency: Mapped[str] = mapped_column(String(3), primary_key=True)
