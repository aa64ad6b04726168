"""
Journal header and journal line models.

A journal is the persisted result of one business event. The
(company_id, idempotency_key) unique constraint is what makes
posting exactly-once: a second insert for the same event fails
at the database, and the store turns that into a replay.

Journals and their lines are append-only. The single permitted
header change is attaching linked_journal_id when a payment
settles an invoice.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, Integer, Numeric, JSON, ForeignKey,
    UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gl_core.models.base import Base
from gl_core.models.enums import EntrySide, PartyType


class Journal(Base):
    __tablename__ = "journal"
    __table_args__ = (
        UniqueConstraint(
            "company_id",
            "idempotency_key",
            name="uq_journal_company_idempotency_key",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    company_id: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    posting_date: Mapped[date] = mapped_column(Date, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    rate_used: Mapped[Decimal] = mapped_column(
        Numeric(20, 10), nullable=False, default=Decimal("1")
    )
    source_doctype: Mapped[str] = mapped_column(String(50), nullable=False)
    source_id: Mapped[str] = mapped_column(String(100), nullable=False)
    idempotency_key: Mapped[str] = mapped_column(String(200), nullable=False)
    is_reversal: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    reverses_journal_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("journal.id"), nullable=True, index=True
    )
    linked_journal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True
    )
    memo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tags: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="journal",
        order_by="JournalLine.line_no",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Journal {self.id} {self.source_doctype}:{self.source_id} "
            f"{self.posting_date}>"
        )


class JournalLine(Base):
    """
    One debit or credit of a journal.

    Every line carries its transaction-currency amount and the
    base-currency equivalent. Within a journal, base debits equal
    base credits.
    """

    __tablename__ = "journal_line"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    journal_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("journal.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    line_no: Mapped[int] = mapped_column(Integer, nullable=False)
    account_code: Mapped[str] = mapped_column(String(40), nullable=False)
    side: Mapped[EntrySide] = mapped_column(
        SAEnum(
            EntrySide,
            name="entry_side_enum",
            values_callable=lambda e: [m.value for m in e],
            create_constraint=True,
        ),
        nullable=False,
    )
    txn_amount: Mapped[Decimal] = mapped_column(
        Numeric(20, 6), nullable=False
    )
    txn_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(
        Numeric(20, 6), nullable=False
    )
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    party_type: Mapped[PartyType | None] = mapped_column(
        SAEnum(
            PartyType,
            name="party_type_enum",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )
    party_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cost_center_id: Mapped[str | None] = mapped_column(
        ForeignKey("dim_cost_center.id"), nullable=True
    )
    project_id: Mapped[str | None] = mapped_column(
        ForeignKey("dim_project.id"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    journal: Mapped["Journal"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return (
            f"<JournalLine {self.side.value} {self.account_code} "
            f"{self.txn_amount} {self.txn_currency}>"
        )
