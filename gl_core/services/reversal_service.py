"""
Reversal service.

A reversal is a new journal that mirrors an existing one: same
accounts, amounts, currencies, parties and dimensions, with every
debit turned into a credit and vice versa. The original is never
touched. Reversals are idempotent per (journal, posting date).
"""

import uuid
from datetime import date

from sqlalchemy.orm import Session

from gl_core.models.journal import Journal, JournalLine
from gl_core.schemas.posting import PostingResult
from gl_core.services.journal_store import JournalStore
from gl_core.services.outbox_emitter import JOURNAL_REVERSED
from gl_core.services.period_guard import PeriodGuard

REVERSAL_DOCTYPE = "JournalReversal"


def reversal_key(journal_id: uuid.UUID, posting_date: date) -> str:
    return f"Reverse:{journal_id}:{posting_date.isoformat()}"


class ReversalService:

    def __init__(self, db: Session):
        self.db = db
        self.store = JournalStore(db)
        self.periods = PeriodGuard(db)

    def reverse_journal(
        self, journal_id: uuid.UUID | str, posting_date: date | str
    ) -> PostingResult:
        """
        Post the mirror image of a journal on the given date.

        Accepts an ISO date string or a date. A second call with the
        same journal and date returns the first reversal's id.

        Raises JournalNotFound if the original does not exist and
        PeriodLocked if the reversal date's period is not open.
        """
        if isinstance(journal_id, str):
            journal_id = uuid.UUID(journal_id)
        if isinstance(posting_date, str):
            posting_date = date.fromisoformat(posting_date[:10])

        original = self.store.get_journal(journal_id)
        key = reversal_key(original.id, posting_date)

        existing = self.store.get_id_by_key(original.company_id, key)
        if existing is not None:
            return PostingResult(journal_id=existing, replayed=True)

        self.periods.assert_open_period(original.company_id, posting_date)

        reversal = Journal(
            company_id=original.company_id,
            posting_date=posting_date,
            currency=original.currency,
            base_currency=original.base_currency,
            rate_used=original.rate_used,
            source_doctype=REVERSAL_DOCTYPE,
            source_id=str(original.id),
            idempotency_key=key,
            is_reversal=True,
            reverses_journal_id=original.id,
            memo=f"Reversal of journal {original.id}",
        )
        lines = [
            JournalLine(
                account_code=line.account_code,
                side=line.side.flipped(),
                txn_amount=line.txn_amount,
                txn_currency=line.txn_currency,
                base_amount=line.base_amount,
                base_currency=line.base_currency,
                party_type=line.party_type,
                party_id=line.party_id,
                cost_center_id=line.cost_center_id,
                project_id=line.project_id,
                description=line.description,
            )
            for line in original.lines
        ]

        return self.store.write_once(
            reversal,
            lines,
            JOURNAL_REVERSED,
            reverses_journal_id=original.id,
        )
