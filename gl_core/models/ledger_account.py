"""
Ledger account model (chart of accounts).

Besides naming the account, each row is the account policy:
whether postings need a cost center or project, and whether
the account is monetary (revalued at period end).
"""

from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from gl_core.models.base import Base
from gl_core.models.enums import AccountType


class LedgerAccount(Base):
    """
    A single account in a company's chart of accounts.

    Accounts are referenced from journal lines by code, so the
    code is unique per company.
    """

    __tablename__ = "ledger_account"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_ledger_account_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[str] = mapped_column(
        ForeignKey("company.id"), nullable=False, index=True
    )
    code: Mapped[str] = mapped_column(String(40), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    is_monetary: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    require_cost_center: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    require_project: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} ({self.account_type.value})>"
