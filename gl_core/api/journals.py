"""
Journal API endpoints: read one journal, reverse one journal.
"""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from gl_core.api.errors import to_http_error
from gl_core.exceptions import LedgerError
from gl_core.models.base import get_db
from gl_core.schemas.posting import (
    JournalResponse,
    PostingResult,
    ReverseRequest,
)
from gl_core.services.journal_store import JournalStore
from gl_core.services.reversal_service import ReversalService

router = APIRouter(prefix="/journals", tags=["Journals"])


@router.get("/{journal_id}", response_model=JournalResponse)
def get_journal(
    journal_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Get a journal with its lines."""
    try:
        return JournalStore(db).get_journal(journal_id)
    except LedgerError as e:
        raise to_http_error(e)


@router.post(
    "/{journal_id}/reverse",
    response_model=PostingResult,
    status_code=201,
)
def reverse_journal(
    journal_id: uuid.UUID,
    request: ReverseRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Reverse a journal on the given posting date.

    Repeating the call for the same journal and date returns the
    existing reversal.
    """
    service = ReversalService(db)
    try:
        result = service.reverse_journal(journal_id, request.posting_date)
    except LedgerError as e:
        raise to_http_error(e)

    if result.replayed:
        response.status_code = 200
        response.headers["Idempotent-Replay"] = "true"
    return result
