"""
Company (tenant) model.

Every ledger row is scoped by a company id. The company holds
the base currency that all journal lines are converted into.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from gl_core.models.base import Base


class Company(Base):
    __tablename__ = "company"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    base_currency: Mapped[str | None] = mapped_column(
        String(3), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Company {self.code} ({self.base_currency})>"
