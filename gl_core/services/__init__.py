"""Business logic services."""

from gl_core.services.rule_registry import load_rule
from gl_core.services.dimension_validator import DimensionValidator
from gl_core.services.currency_converter import CurrencyConverter
from gl_core.services.period_guard import PeriodGuard
from gl_core.services.journal_store import JournalStore
from gl_core.services.outbox_emitter import OutboxEmitter
from gl_core.services.posting_service import PostingService
from gl_core.services.reversal_service import ReversalService
from gl_core.services.fx_revaluation_service import FxRevaluationService

__all__ = [
    "load_rule",
    "DimensionValidator",
    "CurrencyConverter",
    "PeriodGuard",
    "JournalStore",
    "OutboxEmitter",
    "PostingService",
    "ReversalService",
    "FxRevaluationService",
]
