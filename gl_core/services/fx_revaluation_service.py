"""
FX revaluation service.

At month end, every monetary account balance held in a foreign
currency is re-measured at the period-end admin rate. The
difference to its current base carrying amount is posted as an
unrealized gain or loss, one journal per account. The adjustment
is booked into the revalued (account, currency) balance, so the
next run starts from the revalued carrying amount.

A run in dry-run mode records what it would do (run + lines) and
posts nothing. A committing run also takes a lock per (company,
year, month, account, currency); a balance whose lock is already
held was revalued by an earlier commit and is not posted again.
Accounts without a gain/loss mapping, or whose accounts demand
dimensions, are skipped and logged.
"""

import calendar
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import and_, case, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from gl_core.config import get_settings
from gl_core.exceptions import DimensionRequired
from gl_core.logging_config import get_logger
from gl_core.models.base import unit_of_work
from gl_core.models.enums import EntrySide, RevalMode
from gl_core.models.fx import FxAccountMap, FxRevalLine, FxRevalLock, FxRevalRun
from gl_core.models.journal import Journal, JournalLine
from gl_core.models.ledger_account import LedgerAccount
from gl_core.schemas.fx import RevalRequest, RevalResult
from gl_core.services.currency_converter import (
    CurrencyConverter,
    FxQuoteSource,
    RATE_PLACES,
    round_money,
)
from gl_core.services.dimension_validator import DimensionValidator
from gl_core.services.journal_store import JournalStore
from gl_core.services.outbox_emitter import JOURNAL_POSTED, OutboxEmitter
from gl_core.services.period_guard import PeriodGuard

logger = get_logger("services.fx_revaluation")

# deltas smaller than this are rounding noise
NOISE_FLOOR = Decimal("0.005")
AMOUNT_PLACES = Decimal("0.000001")
REVAL_DOCTYPE = "FxRevaluation"


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


@dataclass(frozen=True)
class MonetaryBalance:
    account_code: str
    currency: str
    balance_src: Decimal
    balance_base: Decimal


class FxRevaluationService:

    def __init__(self, db: Session, quotes: FxQuoteSource | None = None):
        self.db = db
        self.converter = CurrencyConverter(db, quotes)
        self.quotes = self.converter.quotes
        self.store = JournalStore(db)
        self.outbox = OutboxEmitter(db)
        self.periods = PeriodGuard(db)
        self.dimensions = DimensionValidator(db)

    def monetary_balances(
        self,
        company_id: str,
        as_of: date,
        accounts: list[str] | None = None,
    ) -> list[MonetaryBalance]:
        """
        Signed balances (debit positive) of monetary accounts as of a
        date, grouped by account and transaction currency.
        """
        signed_src = case(
            (JournalLine.side == EntrySide.DEBIT, JournalLine.txn_amount),
            else_=-JournalLine.txn_amount,
        )
        signed_base = case(
            (JournalLine.side == EntrySide.DEBIT, JournalLine.base_amount),
            else_=-JournalLine.base_amount,
        )
        stmt = (
            select(
                JournalLine.account_code,
                JournalLine.txn_currency,
                func.sum(signed_src),
                func.sum(signed_base),
            )
            .join(Journal, Journal.id == JournalLine.journal_id)
            .join(
                LedgerAccount,
                and_(
                    LedgerAccount.company_id == Journal.company_id,
                    LedgerAccount.code == JournalLine.account_code,
                ),
            )
            .where(
                Journal.company_id == company_id,
                Journal.posting_date <= as_of,
                LedgerAccount.is_monetary.is_(True),
            )
            .group_by(JournalLine.account_code, JournalLine.txn_currency)
            .order_by(JournalLine.account_code, JournalLine.txn_currency)
        )
        if accounts:
            stmt = stmt.where(JournalLine.account_code.in_(accounts))

        return [
            MonetaryBalance(
                account_code=account_code,
                currency=currency,
                balance_src=_to_decimal(src),
                balance_base=_to_decimal(base),
            )
            for account_code, currency, src, base in self.db.execute(stmt)
        ]

    def revalue_monetary_accounts(self, request: RevalRequest) -> RevalResult:
        company_id = request.company_id
        base_ccy = (
            request.base_ccy or self.converter.base_currency(company_id)
        ).upper()
        as_of = month_end(request.year, request.month)

        # dry runs may look at locked periods
        if not request.dry_run:
            self.periods.assert_open_period(company_id, as_of)

        balances = self.monetary_balances(company_id, as_of, request.accounts)

        with unit_of_work(self.db):
            run = FxRevalRun(
                company_id=company_id,
                year=request.year,
                month=request.month,
                mode=RevalMode.DRY_RUN if request.dry_run else RevalMode.COMMIT,
                created_by=request.actor or get_settings().FX_REVAL_ACTOR,
            )
            self.db.add(run)
            self.db.flush()

            lines = self._compute_lines(run.id, company_id, as_of, base_ccy, balances)
            self.db.add_all(lines)
            self.db.flush()

            delta_total = round_money(
                sum((line.delta_base for line in lines), Decimal("0"))
            )

            if request.dry_run:
                result = RevalResult(
                    run_id=run.id, lines=len(lines), delta_total=delta_total
                )
            else:
                journal_ids = self._post_adjustments(
                    run, request, as_of, base_ccy, lines
                )
                result = RevalResult(
                    run_id=run.id,
                    lines=len(lines),
                    journals=len(journal_ids),
                    journal_ids=journal_ids,
                    delta_total=delta_total,
                )

        logger.info(
            "fx_reval_completed",
            extra={
                "company_id": company_id,
                "run_id": str(result.run_id),
                "mode": "dry_run" if request.dry_run else "commit",
                "lines": result.lines,
                "journals": result.journals,
                "delta_total": str(result.delta_total),
            },
        )
        return result

    def _compute_lines(
        self,
        run_id: uuid.UUID,
        company_id: str,
        as_of: date,
        base_ccy: str,
        balances: list[MonetaryBalance],
    ) -> list[FxRevalLine]:
        lines = []
        for balance in balances:
            if not balance.currency or balance.currency.upper() == base_ccy:
                continue

            rate_new = self.quotes.resolve_rate(
                company_id, as_of, balance.currency, base_ccy
            )
            # TODO: read the carrying rate from the original postings instead
            # of deriving it; mixed-rate buckets average out here.
            if balance.balance_base == 0:
                rate_old = rate_new
            else:
                rate_old = (
                    balance.balance_base / (balance.balance_src or Decimal("1"))
                ).quantize(RATE_PLACES)

            delta = round_money(
                balance.balance_src * rate_new - balance.balance_base
            )
            if abs(delta) < NOISE_FLOOR:
                continue

            lines.append(FxRevalLine(
                run_id=run_id,
                gl_account=balance.account_code,
                currency=balance.currency,
                balance_base=balance.balance_base,
                balance_src=balance.balance_src,
                rate_old=rate_old,
                rate_new=rate_new,
                delta_base=delta,
            ))
        return lines

    def _acquire_lock(
        self, company_id: str, year: int, month: int, line: FxRevalLine
    ) -> bool:
        """
        Insert the lock row if absent.

        Returns False when the lock already existed, meaning an
        earlier commit has adjusted this balance for the period.
        """
        values = dict(
            company_id=company_id,
            year=year,
            month=month,
            gl_account=line.gl_account,
            currency=line.currency,
        )
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(FxRevalLock).values(**values)
        elif dialect == "sqlite":
            stmt = sqlite.insert(FxRevalLock).values(**values)
        else:
            key = (company_id, year, month, line.gl_account, line.currency)
            if self.db.get(FxRevalLock, key) is not None:
                return False
            self.db.add(FxRevalLock(**values))
            self.db.flush()
            return True

        result = self.db.execute(stmt.on_conflict_do_nothing())
        return result.rowcount == 1

    def _post_adjustments(
        self,
        run: FxRevalRun,
        request: RevalRequest,
        as_of: date,
        base_ccy: str,
        lines: list[FxRevalLine],
    ) -> list[uuid.UUID]:
        """
        Post one adjustment journal per account.

        The monetary side is posted into the (account, currency)
        bucket it revalues, with a zero transaction amount and the
        delta as base amount, so the bucket's carrying amount moves
        to the new rate. The net goes to the gain or loss account.
        """
        by_account: dict[str, list[FxRevalLine]] = {}
        for line in lines:
            by_account.setdefault(line.gl_account, []).append(line)

        period = f"{request.year}-{request.month:02d}"
        journal_ids = []

        for account, account_lines in by_account.items():
            mapping = self.db.get(FxAccountMap, (run.company_id, account))
            if mapping is None:
                self._skip(run.company_id, account, "no gain/loss mapping")
                continue

            try:
                for code in (
                    account,
                    mapping.unreal_gain_account,
                    mapping.unreal_loss_account,
                ):
                    self.dimensions.ensure_dims_meet_account_policy(
                        code, run.company_id
                    )
            except DimensionRequired as e:
                self._skip(run.company_id, account, str(e))
                continue

            postable = [
                line for line in account_lines
                if self._acquire_lock(run.company_id, request.year, request.month, line)
            ]
            delta = round_money(
                sum((line.delta_base for line in postable), Decimal("0"))
            )
            if not postable or abs(delta) < NOISE_FLOOR:
                continue

            description = f"FX reval {account}"
            journal = Journal(
                company_id=run.company_id,
                posting_date=as_of,
                currency=base_ccy,
                base_currency=base_ccy,
                rate_used=Decimal("1"),
                source_doctype=REVAL_DOCTYPE,
                source_id=str(run.id),
                idempotency_key=f"FxReval:{run.id}:{account}",
                memo=request.memo or f"FX revaluation {period} {account}",
                tags={"module": "fx_reval", "account": account, "period": period},
            )
            # gain: Dr monetary / Cr gain. loss: Dr loss / Cr monetary.
            journal_lines = [
                JournalLine(
                    account_code=account,
                    side=EntrySide.DEBIT if line.delta_base > 0 else EntrySide.CREDIT,
                    txn_amount=Decimal("0"),
                    txn_currency=line.currency,
                    base_amount=abs(line.delta_base),
                    base_currency=base_ccy,
                    description=description,
                )
                for line in postable
            ]
            journal_lines.append(JournalLine(
                account_code=(
                    mapping.unreal_gain_account if delta > 0
                    else mapping.unreal_loss_account
                ),
                side=EntrySide.CREDIT if delta > 0 else EntrySide.DEBIT,
                txn_amount=abs(delta),
                txn_currency=base_ccy,
                base_amount=abs(delta),
                base_currency=base_ccy,
                description=description,
            ))
            if delta < 0:
                journal_lines.reverse()

            journal_id = self.store.insert_journal(journal, journal_lines)
            self.outbox.emit(
                run.company_id,
                JOURNAL_POSTED,
                journal_id=journal_id,
                source_doctype=REVAL_DOCTYPE,
                source_id=run.id,
            )
            journal_ids.append(journal_id)

        return journal_ids

    def _skip(self, company_id: str, account: str, reason: str) -> None:
        logger.warning(
            "fx_reval_account_skipped",
            extra={"company_id": company_id, "account": account, "reason": reason},
        )


def _to_decimal(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(AMOUNT_PLACES)
