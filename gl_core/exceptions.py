"""
Typed errors raised by the posting core.

Callers catch by type, not by message. Every error carries a
machine-readable code so the API layer (or any other caller)
can report it without parsing strings.

    LedgerError
    +-- PostingValidationError      caller error, no retry implied
    |   +-- RuleNotFound
    |   +-- MissingAmountField
    |   +-- DimensionNotFound
    |   +-- DimensionRequired
    |   +-- UnbalancedJournal
    |   +-- EmptyJournal
    |   +-- ExchangeRateNotFound
    +-- PeriodLocked                posting date in a non-open period
    +-- LedgerNotFoundError
        +-- JournalNotFound
        +-- CompanyNotFound
"""

from datetime import date
from decimal import Decimal


class LedgerError(Exception):
    """Base class for all posting core errors."""

    code: str = "LEDGER_ERROR"


# --- Validation ---

class PostingValidationError(LedgerError):
    code = "POSTING_VALIDATION_ERROR"


class RuleNotFound(PostingValidationError):
    code = "RULE_NOT_FOUND"

    def __init__(self, document_type: str):
        self.document_type = document_type
        super().__init__(f"No posting rule registered for '{document_type}'")


class MissingAmountField(PostingValidationError):
    code = "MISSING_AMOUNT_FIELD"

    def __init__(self, document_type: str, field_path: str):
        self.document_type = document_type
        self.field_path = field_path
        super().__init__(
            f"Missing amount field '{field_path}' on {document_type}"
        )


class DimensionNotFound(PostingValidationError):
    code = "DIMENSION_NOT_FOUND"

    def __init__(self, kind: str, dimension_id: str):
        self.kind = kind
        self.dimension_id = dimension_id
        super().__init__(
            f"{kind} '{dimension_id}' does not exist or is not active"
        )


class DimensionRequired(PostingValidationError):
    code = "DIMENSION_REQUIRED"

    def __init__(self, account_code: str, kind: str):
        self.account_code = account_code
        self.kind = kind
        super().__init__(f"Account {account_code} requires a {kind}")


class UnbalancedJournal(PostingValidationError):
    code = "UNBALANCED_JOURNAL"

    def __init__(self, debits: Decimal, credits: Decimal, currency: str):
        self.debits = debits
        self.credits = credits
        self.currency = currency
        super().__init__(
            f"Journal does not balance in {currency}: "
            f"debits={debits}, credits={credits}"
        )


class EmptyJournal(PostingValidationError):
    code = "EMPTY_JOURNAL"

    def __init__(self, document_type: str, document_id: str):
        self.document_type = document_type
        self.document_id = document_id
        super().__init__(
            f"{document_type} {document_id} produces no non-zero lines"
        )


class ExchangeRateNotFound(PostingValidationError):
    code = "EXCHANGE_RATE_NOT_FOUND"

    def __init__(self, source: str, target: str, as_of: date):
        self.source = source
        self.target = target
        self.as_of = as_of
        super().__init__(
            f"No exchange rate {source}->{target} on or before {as_of}"
        )


# --- Policy / temporal ---

class PeriodLocked(LedgerError):
    """Posting date falls in a period whose state is not open."""

    code = "PERIOD_LOCKED"

    def __init__(self, company_id: str, year: int, month: int, state: str):
        self.company_id = company_id
        self.year = year
        self.month = month
        self.state = state
        super().__init__(
            f"Period {year}-{month:02d} is {state} for company {company_id}"
        )


# --- Not found ---

class LedgerNotFoundError(LedgerError):
    code = "NOT_FOUND"


class JournalNotFound(LedgerNotFoundError):
    code = "JOURNAL_NOT_FOUND"

    def __init__(self, journal_id):
        self.journal_id = journal_id
        super().__init__(f"Journal {journal_id} not found")


class CompanyNotFound(LedgerNotFoundError):
    code = "COMPANY_NOT_FOUND"

    def __init__(self, company_id: str):
        self.company_id = company_id
        super().__init__(f"Company {company_id} not found")
