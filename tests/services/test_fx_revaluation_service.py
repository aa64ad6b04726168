"""
Tests for the FxRevaluationService.

The MYR company sells 250 USD on Jan 15 at 4.0, so AR carries
250 USD / 1000 MYR going into month end.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from gl_core.exceptions import PeriodLocked
from gl_core.models import (
    EntrySide,
    FxAdminRate,
    FxRevalLine,
    FxRevalLock,
    FxRevalRun,
    Journal,
    LedgerAccount,
    OutboxEntry,
    Period,
    PeriodState,
    RevalMode,
)
from gl_core.schemas.documents import CustomerPayment, InvoiceTotals, SalesInvoice
from gl_core.schemas.fx import RevalRequest
from gl_core.services.fx_revaluation_service import (
    FxRevaluationService,
    month_end,
)
from gl_core.services.posting_service import PostingService


# --- Helpers ---

def post_usd_invoice(db, amount="250", doc_id="SI-1", doc_date=date(2024, 1, 15)):
    return PostingService(db).post_document(SalesInvoice(
        id=doc_id,
        company_id="acme-my",
        doc_date=doc_date,
        currency="USD",
        customer_id="CUST-1",
        totals=InvoiceTotals(
            subtotal=Decimal(amount),
            grand_total=Decimal(amount),
        ),
    ))


def set_month_end_rate(db, rate):
    db.add(FxAdminRate(
        company_id="acme-my",
        as_of_date=date(2024, 1, 31),
        src_ccy="USD",
        dst_ccy="MYR",
        rate=Decimal(rate),
    ))
    db.commit()


def reval(db, dry_run=True, **extra):
    request = RevalRequest(
        company_id="acme-my", year=2024, month=1, dry_run=dry_run, **extra
    )
    return FxRevaluationService(db).revalue_monetary_accounts(request)


def count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def reval_journals(db):
    return db.execute(
        select(Journal).where(Journal.source_doctype == "FxRevaluation")
    ).scalars().all()


def test_month_end():
    assert month_end(2024, 2) == date(2024, 2, 29)
    assert month_end(2023, 2) == date(2023, 2, 28)
    assert month_end(2024, 12) == date(2024, 12, 31)


class TestMonetaryBalances:

    def test_balances_grouped_by_account_and_currency(
        self, db_session, myr_company
    ):
        post_usd_invoice(db_session)
        balances = FxRevaluationService(db_session).monetary_balances(
            "acme-my", date(2024, 1, 31)
        )

        # Revenue is not monetary
        assert len(balances) == 1
        balance = balances[0]
        assert balance.account_code == "AR"
        assert balance.currency == "USD"
        assert balance.balance_src == Decimal("250")
        assert balance.balance_base == Decimal("1000")

    def test_credits_reduce_the_balance(self, db_session, myr_company):
        post_usd_invoice(db_session)
        PostingService(db_session).post_document(CustomerPayment(
            id="CP-1",
            company_id="acme-my",
            doc_date=date(2024, 1, 20),
            currency="USD",
            customer_id="CUST-1",
            amount=Decimal("100"),
        ))
        balances = {
            b.account_code: b
            for b in FxRevaluationService(db_session).monetary_balances(
                "acme-my", date(2024, 1, 31)
            )
        }

        assert balances["AR"].balance_src == Decimal("150")
        assert balances["AR"].balance_base == Decimal("600")
        assert balances["Bank"].balance_src == Decimal("100")

    def test_later_postings_excluded(self, db_session, myr_company):
        post_usd_invoice(db_session)
        balances = FxRevaluationService(db_session).monetary_balances(
            "acme-my", date(2024, 1, 14)
        )
        assert balances == []


class TestDryRun:

    def test_unchanged_rate_produces_no_lines(self, db_session, myr_company):
        post_usd_invoice(db_session)

        result = reval(db_session)

        assert result.lines == 0
        assert result.delta_total == Decimal("0")
        assert result.journals is None
        run = db_session.get(FxRevalRun, result.run_id)
        assert run.mode == RevalMode.DRY_RUN
        assert run.created_by == "system"

    def test_new_rate_records_line_without_posting(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session)

        assert result.lines == 1
        assert result.delta_total == Decimal("20.00")
        assert result.journals is None
        assert result.journal_ids == []

        line = db_session.execute(select(FxRevalLine)).scalar_one()
        assert line.run_id == result.run_id
        assert line.gl_account == "AR"
        assert line.currency == "USD"
        assert line.balance_src == Decimal("250")
        assert line.balance_base == Decimal("1000")
        assert line.rate_old == Decimal("4")
        assert line.rate_new == Decimal("4.08")
        assert line.delta_base == Decimal("20.00")

        assert reval_journals(db_session) == []
        assert count(db_session, FxRevalLock) == 0

    def test_dry_run_allowed_in_closed_period(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")
        db_session.add(Period(
            company_id="acme-my", year=2024, month=1, state=PeriodState.CLOSED
        ))
        db_session.commit()

        assert reval(db_session).lines == 1


class TestCommit:

    def test_gain_posts_debit_account_credit_gain(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session, dry_run=False, actor="controller")

        assert result.lines == 1
        assert result.journals == 1
        assert result.delta_total == Decimal("20.00")

        journal = db_session.get(Journal, result.journal_ids[0])
        assert journal.posting_date == date(2024, 1, 31)
        assert journal.currency == "MYR"
        assert journal.idempotency_key == f"FxReval:{result.run_id}:AR"
        assert journal.tags == {
            "module": "fx_reval", "account": "AR", "period": "2024-01",
        }
        assert journal.memo == "FX revaluation 2024-01 AR"

        debit, credit = journal.lines
        assert (debit.account_code, debit.side) == ("AR", EntrySide.DEBIT)
        assert (credit.account_code, credit.side) == ("FX Gain", EntrySide.CREDIT)
        assert debit.base_amount == credit.base_amount == Decimal("20")
        # the adjustment lands in the USD balance it revalues
        assert debit.txn_currency == "USD"
        assert debit.txn_amount == Decimal("0")
        assert (credit.txn_currency, credit.txn_amount) == ("MYR", Decimal("20"))

        run = db_session.get(FxRevalRun, result.run_id)
        assert run.mode == RevalMode.COMMIT
        assert run.created_by == "controller"
        assert count(db_session, FxRevalLock) == 1

    def test_loss_posts_debit_loss_credit_account(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "3.96")

        result = reval(db_session, dry_run=False, memo="January reval")

        assert result.delta_total == Decimal("-10.00")
        journal = db_session.get(Journal, result.journal_ids[0])
        debit, credit = journal.lines
        assert debit.account_code == "FX Loss"
        assert credit.account_code == "AR"
        assert debit.base_amount == Decimal("10")
        assert journal.memo == "January reval"

    def test_second_commit_posts_nothing(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        first = reval(db_session, dry_run=False)
        second = reval(db_session, dry_run=False)

        assert first.journals == 1
        assert second.lines == 0
        assert second.journals == 0
        assert second.journal_ids == []
        assert len(reval_journals(db_session)) == 1

    def test_adjustment_moves_carrying_amount(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")
        reval(db_session, dry_run=False)

        balances = FxRevaluationService(db_session).monetary_balances(
            "acme-my", date(2024, 1, 31)
        )

        assert len(balances) == 1
        assert balances[0].currency == "USD"
        assert balances[0].balance_src == Decimal("250")
        assert balances[0].balance_base == Decimal("1020")

    def test_next_month_at_same_rate_posts_nothing(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")
        january = reval(db_session, dry_run=False)

        february = FxRevaluationService(db_session).revalue_monetary_accounts(
            RevalRequest(company_id="acme-my", year=2024, month=2, dry_run=False)
        )

        assert january.journals == 1
        assert february.lines == 0
        assert february.journals == 0
        assert february.delta_total == Decimal("0")
        assert len(reval_journals(db_session)) == 1

    def test_locked_balance_not_adjusted_twice_in_period(
        self, db_session, myr_company
    ):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")
        first = reval(db_session, dry_run=False)

        # 100 USD more at 4.0 leaves 8.00 unrevalued at 4.08
        post_usd_invoice(
            db_session, amount="100", doc_id="SI-2", doc_date=date(2024, 1, 20)
        )
        second = reval(db_session, dry_run=False)

        assert first.journals == 1
        assert second.lines == 1
        assert second.delta_total == Decimal("8.00")
        assert second.journals == 0
        assert len(reval_journals(db_session)) == 1
        assert count(db_session, FxRevalLock) == 1

    def test_account_demanding_dimension_is_skipped(
        self, db_session, myr_company
    ):
        gain = db_session.execute(
            select(LedgerAccount).where(
                LedgerAccount.company_id == "acme-my",
                LedgerAccount.code == "FX Gain",
            )
        ).scalar_one()
        gain.require_cost_center = True
        db_session.commit()
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session, dry_run=False)

        assert result.lines == 1
        assert result.journals == 0
        assert reval_journals(db_session) == []
        assert count(db_session, FxRevalLock) == 0

    def test_commit_emits_journal_posted(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session, dry_run=False)

        events = [
            event
            for event in db_session.execute(select(OutboxEntry)).scalars()
            if event.payload.get("source_doctype") == "FxRevaluation"
        ]
        assert len(events) == 1
        assert events[0].payload["journal_id"] == str(result.journal_ids[0])

    def test_account_without_mapping_is_skipped(self, db_session, myr_company):
        post_usd_invoice(db_session)
        PostingService(db_session).post_document(CustomerPayment(
            id="CP-1",
            company_id="acme-my",
            doc_date=date(2024, 1, 20),
            currency="USD",
            customer_id="CUST-1",
            amount=Decimal("100"),
        ))
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session, dry_run=False)

        # AR 150 USD -> +12.00, Bank 100 USD -> +8.00 (Bank has no mapping)
        assert result.lines == 2
        assert result.delta_total == Decimal("20.00")
        assert result.journals == 1
        journal = db_session.get(Journal, result.journal_ids[0])
        assert journal.tags["account"] == "AR"
        assert count(db_session, FxRevalLock) == 1

    def test_account_filter(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")

        result = reval(db_session, dry_run=False, accounts=["Bank"])

        assert result.lines == 0
        assert result.journals == 0

    def test_commit_rejected_in_closed_period(self, db_session, myr_company):
        post_usd_invoice(db_session)
        set_month_end_rate(db_session, "4.08")
        db_session.add(Period(
            company_id="acme-my",
            year=2024,
            month=1,
            state=PeriodState.PENDING_CLOSE,
        ))
        db_session.commit()

        with pytest.raises(PeriodLocked):
            reval(db_session, dry_run=False)
        assert count(db_session, FxRevalRun) == 0
