"""
Pydantic schemas for FX revaluation.
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field


class RevalRequest(BaseModel):
    company_id: str = Field(min_length=1, max_length=50)
    year: int = Field(ge=1900, le=9999)
    month: int = Field(ge=1, le=12)
    dry_run: bool = True
    # restrict the run to these monetary accounts
    accounts: list[str] | None = None
    # defaults to the company's base currency
    base_ccy: str | None = Field(default=None, min_length=3, max_length=3)
    memo: str | None = Field(default=None, max_length=255)
    actor: str | None = Field(default=None, max_length=100)


class RevalResult(BaseModel):
    run_id: uuid.UUID
    lines: int
    journals: int | None = None
    journal_ids: list[uuid.UUID] = Field(default_factory=list)
    delta_total: Decimal
