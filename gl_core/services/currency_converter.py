"""
Currency converter.

Every journal line carries its amount twice: in the transaction
currency it was posted in, and in the company's base currency.
This service resolves the base currency and the rate effective
on the document date, and computes the base amounts.

Rates come from an FxQuoteSource. The default source reads the
administrator-maintained fx_admin_rates table.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from gl_core.config import get_settings
from gl_core.exceptions import CompanyNotFound, ExchangeRateNotFound
from gl_core.models.company import Company
from gl_core.models.fx import FxAdminRate

CENT = Decimal("0.01")
RATE_PLACES = Decimal("0.0000000001")


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimals, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


class FxQuoteSource(Protocol):
    def resolve_rate(
        self, company_id: str, as_of: date, source: str, target: str
    ) -> Decimal:
        """Return how many `target` units one `source` unit is worth."""
        ...


class AdminRateQuoteSource:
    """
    Rates from fx_admin_rates.

    Picks the latest rate on or before the as-of date. If only the
    opposite pair is maintained, its reciprocal is used.
    """

    def __init__(self, db: Session):
        self.db = db

    def _latest(
        self, company_id: str, as_of: date, source: str, target: str
    ) -> Decimal | None:
        return self.db.execute(
            select(FxAdminRate.rate)
            .where(
                FxAdminRate.company_id == company_id,
                FxAdminRate.src_ccy == source,
                FxAdminRate.dst_ccy == target,
                FxAdminRate.as_of_date <= as_of,
            )
            .order_by(FxAdminRate.as_of_date.desc())
            .limit(1)
        ).scalar_one_or_none()

    def resolve_rate(
        self, company_id: str, as_of: date, source: str, target: str
    ) -> Decimal:
        source, target = source.upper(), target.upper()
        if source == target:
            return Decimal("1")

        rate = self._latest(company_id, as_of, source, target)
        if rate is not None:
            return Decimal(str(rate))

        inverse = self._latest(company_id, as_of, target, source)
        if inverse:
            return (Decimal("1") / Decimal(str(inverse))).quantize(RATE_PLACES)

        raise ExchangeRateNotFound(source, target, as_of)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str


@dataclass(frozen=True)
class BaseAmounts:
    base_amounts: list[Decimal]
    base_currency: str
    rate_used: Decimal


class CurrencyConverter:

    def __init__(self, db: Session, quotes: FxQuoteSource | None = None):
        self.db = db
        self.quotes = quotes or AdminRateQuoteSource(db)

    def base_currency(self, company_id: str) -> str:
        """The company's base currency, or the configured default."""
        company = self.db.get(Company, company_id)
        if company is None:
            raise CompanyNotFound(company_id)
        return (
            company.base_currency or get_settings().DEFAULT_BASE_CURRENCY
        ).upper()

    def compute_base_amounts(
        self,
        company_id: str,
        as_of: date,
        lines: Sequence[Money],
    ) -> BaseAmounts:
        """
        Convert each line into the base currency at the as-of rate.

        Lines already in base currency are copied unchanged at rate 1.
        Converted amounts are rounded half-up to 2 decimals. rate_used
        is the rate of the first line's currency.
        """
        base_currency = self.base_currency(company_id)
        rates: dict[str, Decimal] = {}
        base_amounts = []

        for line in lines:
            currency = line.currency.upper()
            if currency not in rates:
                rates[currency] = self.quotes.resolve_rate(
                    company_id, as_of, currency, base_currency
                )
            if currency == base_currency:
                base_amounts.append(Decimal(line.amount))
            else:
                base_amounts.append(round_money(line.amount * rates[currency]))

        rate_used = rates[lines[0].currency.upper()] if lines else Decimal("1")
        return BaseAmounts(
            base_amounts=base_amounts,
            base_currency=base_currency,
            rate_used=rate_used,
        )
