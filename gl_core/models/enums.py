"""
Shared enumerations for database models.

Python enums mapped to database enums, so an invalid side,
period state or run mode is rejected by the database too.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class EntrySide(str, enum.Enum):
    """Debit/credit indicator of a journal line."""
    DEBIT = "D"
    CREDIT = "C"

    def flipped(self) -> "EntrySide":
        return EntrySide.CREDIT if self is EntrySide.DEBIT else EntrySide.DEBIT


class PeriodState(str, enum.Enum):
    """open -> pending_close -> closed."""
    OPEN = "open"
    PENDING_CLOSE = "pending_close"
    CLOSED = "closed"


class DimensionKind(str, enum.Enum):
    COST_CENTER = "cost_center"
    PROJECT = "project"


class PartyType(str, enum.Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class RevalMode(str, enum.Enum):
    DRY_RUN = "dry_run"
    COMMIT = "commit"
