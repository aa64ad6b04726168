"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from gl_core.models.base import Base
from gl_core.models.enums import (
    AccountType,
    EntrySide,
    PeriodState,
    DimensionKind,
    PartyType,
    RevalMode,
)
from gl_core.models.company import Company
from gl_core.models.ledger_account import LedgerAccount
from gl_core.models.dimension import CostCenter, Project
from gl_core.models.period import Period
from gl_core.models.journal import Journal, JournalLine
from gl_core.models.outbox import OutboxEntry
from gl_core.models.fx import (
    FxAdminRate,
    FxAccountMap,
    FxRevalRun,
    FxRevalLine,
    FxRevalLock,
)

__all__ = [
    "Base",
    "AccountType",
    "EntrySide",
    "PeriodState",
    "DimensionKind",
    "PartyType",
    "RevalMode",
    "Company",
    "LedgerAccount",
    "CostCenter",
    "Project",
    "Period",
    "Journal",
    "JournalLine",
    "OutboxEntry",
    "FxAdminRate",
    "FxAccountMap",
    "FxRevalRun",
    "FxRevalLine",
    "FxRevalLock",
]
