"""
Pydantic schemas for posting, reversal and journal reads.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from gl_core.models.enums import EntrySide, PartyType


class PostingResult(BaseModel):
    """
    Outcome of a posting or reversal.

    journal_id is the same whether the journal was created by
    this call or already existed (replayed=True).
    """
    journal_id: uuid.UUID
    replayed: bool = False


class ReverseRequest(BaseModel):
    posting_date: date


class JournalLineResponse(BaseModel):
    id: uuid.UUID
    line_no: int
    account_code: str
    side: EntrySide
    txn_amount: Decimal
    txn_currency: str
    base_amount: Decimal
    base_currency: str
    party_type: PartyType | None
    party_id: str | None
    cost_center_id: str | None
    project_id: str | None
    description: str | None

    model_config = {"from_attributes": True}


class JournalResponse(BaseModel):
    id: uuid.UUID
    company_id: str
    posting_date: date
    currency: str
    base_currency: str
    rate_used: Decimal
    source_doctype: str
    source_id: str
    idempotency_key: str
    is_reversal: bool
    reverses_journal_id: uuid.UUID | None
    linked_journal_id: uuid.UUID | None
    memo: str | None
    tags: dict | None
    created_at: datetime
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}
