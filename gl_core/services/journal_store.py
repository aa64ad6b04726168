"""
Idempotent journal store.

Journals are keyed by (company_id, idempotency_key). The store
checks the key before inserting, but the check alone is not
enough: two concurrent requests can both see "no journal yet".
The unique constraint on journal decides the race; the loser's
IntegrityError is rolled back and answered with the winner's id.
"""

import uuid
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gl_core.exceptions import JournalNotFound
from gl_core.logging_config import get_logger
from gl_core.models.base import unit_of_work
from gl_core.models.journal import Journal, JournalLine
from gl_core.schemas.posting import PostingResult
from gl_core.services.outbox_emitter import OutboxEmitter

logger = get_logger("services.journal_store")


class JournalStore:

    def __init__(self, db: Session):
        self.db = db
        self.outbox = OutboxEmitter(db)

    def get_id_by_key(
        self, company_id: str, idempotency_key: str
    ) -> uuid.UUID | None:
        return self.db.execute(
            select(Journal.id).where(
                Journal.company_id == company_id,
                Journal.idempotency_key == idempotency_key,
            )
        ).scalar_one_or_none()

    def insert_journal(
        self, journal: Journal, lines: list[JournalLine]
    ) -> uuid.UUID:
        """
        Stage a header and its lines in the caller's transaction.

        Lines are numbered in the order given. Raises IntegrityError
        at flush if the idempotency key is already taken.
        """
        for line_no, line in enumerate(lines, start=1):
            line.line_no = line_no
        journal.lines = list(lines)
        self.db.add(journal)
        self.db.flush()
        return journal.id

    def write_once(
        self,
        journal: Journal,
        lines: list[JournalLine],
        event_name: str,
        on_insert: Callable[[uuid.UUID], None] | None = None,
        **event_fields,
    ) -> PostingResult:
        """
        Insert a journal plus its outbox event exactly once.

        Runs as a single transaction. If a journal already exists
        under the key, nothing is written and its id is returned
        with replayed=True. on_insert runs inside the transaction
        right after a fresh insert.
        """
        company_id = journal.company_id
        key = journal.idempotency_key

        try:
            with unit_of_work(self.db):
                existing = self.get_id_by_key(company_id, key)
                if existing is not None:
                    logger.info(
                        "journal_replayed",
                        extra={"company_id": company_id, "idempotency_key": key},
                    )
                    return PostingResult(journal_id=existing, replayed=True)

                journal_id = self.insert_journal(journal, lines)
                if on_insert is not None:
                    on_insert(journal_id)
                self.outbox.emit(
                    company_id, event_name, journal_id=journal_id, **event_fields
                )
        except IntegrityError:
            # unit_of_work already rolled back
            existing = self.get_id_by_key(company_id, key)
            if existing is None:
                raise
            logger.warning(
                "concurrent_insert_conflict",
                extra={"company_id": company_id, "idempotency_key": key},
            )
            return PostingResult(journal_id=existing, replayed=True)

        logger.info(
            "journal_posted",
            extra={
                "company_id": company_id,
                "journal_id": str(journal_id),
                "idempotency_key": key,
            },
        )
        return PostingResult(journal_id=journal_id, replayed=False)

    def get_journal(self, journal_id: uuid.UUID) -> Journal:
        journal = self.db.get(Journal, journal_id)
        if journal is None:
            raise JournalNotFound(journal_id)
        return journal

    def link_journal(
        self, journal_id: uuid.UUID, linked_journal_id: uuid.UUID
    ) -> Journal:
        """
        Point a journal at the journal that settles it.

        The one header mutation journals allow. Joins the caller's
        transaction.
        """
        journal = self.get_journal(journal_id)
        journal.linked_journal_id = linked_journal_id
        self.db.flush()
        return journal
