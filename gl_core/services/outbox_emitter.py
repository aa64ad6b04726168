"""
Outbox emitter.

Appends a domain event to the outbox table using the caller's
session, so the event commits or rolls back together with the
journal it describes. Draining the outbox is someone else's job.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from gl_core.models.outbox import OutboxEntry

JOURNAL_POSTED = "JournalPosted"
JOURNAL_REVERSED = "JournalReversed"


class OutboxEmitter:

    def __init__(self, db: Session):
        self.db = db

    def emit(self, company_id: str, name: str, **fields) -> OutboxEntry:
        """Stage an event; it is written when the session flushes."""
        payload = {
            "_meta": {
                "name": name,
                "version": 1,
                "occurred_at": datetime.now(timezone.utc).isoformat(),
            },
            "company_id": company_id,
        }
        payload.update({k: _jsonable(v) for k, v in fields.items()})

        entry = OutboxEntry(company_id=company_id, topic=name, payload=payload)
        self.db.add(entry)
        return entry


def _jsonable(value):
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
