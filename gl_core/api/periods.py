"""
Period check endpoint.

Lets callers ask up front whether a date is postable: 204 when
the period is open (or not set up), 423 when it is locked.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from gl_core.api.errors import to_http_error
from gl_core.exceptions import PeriodLocked
from gl_core.models.base import get_db
from gl_core.services.period_guard import PeriodGuard

router = APIRouter(prefix="/periods", tags=["Periods"])


@router.get("/{company_id}/check", status_code=204)
def check_period(
    company_id: str,
    posting_date: date,
    db: Session = Depends(get_db),
):
    try:
        PeriodGuard(db).assert_open_period(company_id, posting_date)
    except PeriodLocked as e:
        raise to_http_error(e)
    return Response(status_code=204)
