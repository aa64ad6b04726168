"""
Posting service: builds journals from documents by rule.

Steps for one document:
1. Load the rule and render the idempotency key
2. Gate on the period guard (before any write)
3. Build one line per configured debit, then per credit
4. Resolve and validate dimensions for every line
5. Convert every line to the base currency
6. Insert header, lines and a JournalPosted event in one
   transaction, or return the existing journal for the key

Steps 1-5 only read. Anything that fails there aborts the
posting before the transaction starts. A document already
posted under its key is answered with the existing journal
before any of the checks run.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from gl_core.exceptions import (
    EmptyJournal,
    JournalNotFound,
    MissingAmountField,
    UnbalancedJournal,
)
from gl_core.logging_config import get_logger
from gl_core.models.enums import DimensionKind, EntrySide, PartyType
from gl_core.models.journal import Journal, JournalLine
from gl_core.schemas.documents import (
    CustomerPayment,
    SourceDocument,
    SupplierPayment,
)
from gl_core.schemas.posting import PostingResult
from gl_core.services.currency_converter import (
    CurrencyConverter,
    FxQuoteSource,
    Money,
)
from gl_core.services.dimension_validator import DimensionValidator
from gl_core.services.journal_store import JournalStore
from gl_core.services.outbox_emitter import JOURNAL_POSTED
from gl_core.services.period_guard import PeriodGuard
from gl_core.services.rule_registry import DocumentType, PostingRule, load_rule

logger = get_logger("services.posting")


@dataclass
class LineDraft:
    id: uuid.UUID
    account_code: str
    side: EntrySide
    amount: Decimal
    currency: str
    party_type: PartyType | None = None
    party_id: str | None = None
    cost_center: str | None = None
    project: str | None = None


class PostingService:

    def __init__(self, db: Session, quotes: FxQuoteSource | None = None):
        self.db = db
        self.store = JournalStore(db)
        self.dimensions = DimensionValidator(db)
        self.periods = PeriodGuard(db)
        self.converter = CurrencyConverter(db, quotes)

    def post_document(self, document: SourceDocument) -> PostingResult:
        """Post a document under its own type, id, currency and company."""
        return self.post_by_rule(
            document.doc_type,
            document.id,
            document.currency,
            document.company_id,
            document,
        )

    def post_by_rule(
        self,
        document_type: str | DocumentType,
        document_id: str,
        currency: str,
        company_id: str,
        document: SourceDocument,
    ) -> PostingResult:
        """
        Post a document exactly once.

        Calling again with input that renders the same idempotency
        key returns the first journal's id with replayed=True and
        writes nothing.
        """
        rule = load_rule(document_type)
        key = rule.render_key(document_id, document)
        currency = currency.upper()
        posting_date = document.doc_date

        # a retry is answered even after its period has closed
        existing = self.store.get_id_by_key(company_id, key)
        if existing is not None:
            logger.info(
                "journal_replayed",
                extra={"company_id": company_id, "idempotency_key": key},
            )
            return PostingResult(journal_id=existing, replayed=True)

        self.periods.assert_open_period(company_id, posting_date)

        drafts = self._build_lines(rule, document, document_id, currency)
        self._apply_dimensions(drafts, document, company_id)
        self._check_balance(drafts, currency)

        fx = self.converter.compute_base_amounts(
            company_id,
            posting_date,
            [Money(d.amount, d.currency) for d in drafts],
        )
        base_amounts = absorb_rounding(drafts, fx.base_amounts)

        settles = self._settled_journal(document, company_id)

        journal = Journal(
            company_id=company_id,
            posting_date=posting_date,
            currency=currency,
            base_currency=fx.base_currency,
            rate_used=fx.rate_used,
            source_doctype=rule.document_type.value,
            source_id=document_id,
            idempotency_key=key,
        )
        lines = [
            JournalLine(
                id=draft.id,
                account_code=draft.account_code,
                side=draft.side,
                txn_amount=draft.amount,
                txn_currency=draft.currency,
                base_amount=base_amount,
                base_currency=fx.base_currency,
                party_type=draft.party_type,
                party_id=draft.party_id,
                cost_center_id=draft.cost_center,
                project_id=draft.project,
            )
            for draft, base_amount in zip(drafts, base_amounts)
        ]

        on_insert = None
        if settles is not None:
            def on_insert(journal_id):
                self.store.link_journal(settles, journal_id)

        return self.store.write_once(
            journal,
            lines,
            JOURNAL_POSTED,
            on_insert=on_insert,
            source_doctype=rule.document_type.value,
            source_id=document_id,
        )

    def _build_lines(
        self,
        rule: PostingRule,
        document: SourceDocument,
        document_id: str,
        currency: str,
    ) -> list[LineDraft]:
        values = document.field_values()
        drafts = []
        configured = [(line, EntrySide.DEBIT) for line in rule.debits] + [
            (line, EntrySide.CREDIT) for line in rule.credits
        ]

        for rule_line, side in configured:
            raw = values.get(rule_line.amount_field)
            if raw is None:
                raise MissingAmountField(
                    rule.document_type.value, rule_line.amount_field
                )
            amount = Decimal(str(raw))
            if amount == 0:
                continue

            draft = LineDraft(
                id=uuid.uuid4(),
                account_code=rule_line.account,
                side=side,
                amount=amount,
                currency=currency,
            )
            if rule_line.party is not None:
                party_id = values.get(rule_line.party.field)
                if party_id:
                    draft.party_type = rule_line.party.type
                    draft.party_id = str(party_id)
            drafts.append(draft)

        if not drafts:
            raise EmptyJournal(rule.document_type.value, document_id)
        return drafts

    def _apply_dimensions(
        self,
        drafts: list[LineDraft],
        document: SourceDocument,
        company_id: str,
    ) -> None:
        """Line value, else document default, else None; then validate."""
        for draft in drafts:
            override = document.dimension_overrides.get(draft.account_code)
            line_cc = override.cost_center if override else None
            line_project = override.project if override else None
            draft.cost_center = line_cc or document.cost_center
            draft.project = line_project or document.project

            self.dimensions.ensure_dim_valid(
                draft.cost_center, DimensionKind.COST_CENTER
            )
            self.dimensions.ensure_dim_valid(draft.project, DimensionKind.PROJECT)
            self.dimensions.ensure_dims_meet_account_policy(
                draft.account_code,
                company_id,
                cost_center=draft.cost_center,
                project=draft.project,
            )

    def _check_balance(self, drafts: list[LineDraft], currency: str) -> None:
        debits = sum(
            (d.amount for d in drafts if d.side == EntrySide.DEBIT), Decimal("0")
        )
        credits = sum(
            (d.amount for d in drafts if d.side == EntrySide.CREDIT), Decimal("0")
        )
        if debits != credits:
            raise UnbalancedJournal(debits, credits, currency)

    def _settled_journal(
        self, document: SourceDocument, company_id: str
    ) -> uuid.UUID | None:
        """Invoice journal a payment settles, checked before posting."""
        if not isinstance(document, (CustomerPayment, SupplierPayment)):
            return None
        if document.invoice_journal_id is None:
            return None
        invoice = self.store.get_journal(document.invoice_journal_id)
        if invoice.company_id != company_id:
            raise JournalNotFound(document.invoice_journal_id)
        return invoice.id


def absorb_rounding(
    drafts: list[LineDraft], base_amounts: list[Decimal]
) -> list[Decimal]:
    """
    Make base debits equal base credits.

    Converting each line separately can leave a cent or two of
    difference. It goes onto the largest line of the short side.
    """
    amounts = list(base_amounts)
    debits = sum(
        (a for d, a in zip(drafts, amounts) if d.side == EntrySide.DEBIT),
        Decimal("0"),
    )
    credits = sum(
        (a for d, a in zip(drafts, amounts) if d.side == EntrySide.CREDIT),
        Decimal("0"),
    )
    diff = debits - credits
    if diff == 0:
        return amounts

    short_side = EntrySide.CREDIT if diff > 0 else EntrySide.DEBIT
    candidates = [i for i, d in enumerate(drafts) if d.side == short_side]
    target = max(candidates, key=lambda i: amounts[i])
    amounts[target] += abs(diff)
    return amounts
