"""
Period guard.

Answers one question before anything is written: may a journal
be posted on this date for this company? Period state changes
are made elsewhere; the guard only inspects them.
"""

from datetime import date

from sqlalchemy.orm import Session

from gl_core.exceptions import PeriodLocked
from gl_core.logging_config import get_logger
from gl_core.models.enums import PeriodState
from gl_core.models.period import Period

logger = get_logger("services.period_guard")


class PeriodGuard:

    def __init__(self, db: Session):
        self.db = db

    def assert_open_period(self, company_id: str, posting_date: date) -> None:
        """
        Raise PeriodLocked unless the posting date's period is open.

        A company/month with no period row is treated as open.
        """
        period = self.db.get(
            Period, (company_id, posting_date.year, posting_date.month)
        )
        if period is None or period.state == PeriodState.OPEN:
            return

        logger.info(
            "period_locked",
            extra={
                "company_id": company_id,
                "posting_date": posting_date.isoformat(),
                "state": period.state.value,
            },
        )
        raise PeriodLocked(
            company_id,
            posting_date.year,
            posting_date.month,
            period.state.value,
        )
