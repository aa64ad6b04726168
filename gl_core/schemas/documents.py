"""
Source documents accepted for posting.

Each document type is its own pydantic model with a doc_type
literal, so an incoming payload is parsed into exactly one known
shape (PostingDocument is the tagged union). Posting rules never
look at attributes directly; they read amounts and party ids
through field_values(), which lists every path a rule may use.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, Field


class LineDimensions(BaseModel):
    """Dimension values for the lines posted to one account."""
    cost_center: str | None = None
    project: str | None = None


class SourceDocument(BaseModel):
    """Fields every postable document carries."""
    id: str = Field(min_length=1, max_length=100)
    company_id: str = Field(min_length=1, max_length=50)
    doc_date: date
    currency: str = Field(min_length=3, max_length=3)
    cost_center: str | None = Field(default=None, max_length=50)
    project: str | None = Field(default=None, max_length=50)
    # account code -> dimensions for lines on that account
    dimension_overrides: dict[str, LineDimensions] = Field(default_factory=dict)

    def field_values(self) -> dict[str, object]:
        return {
            "id": self.id,
            "company_id": self.company_id,
            "doc_date": self.doc_date.isoformat(),
            "currency": self.currency,
        }


class InvoiceTotals(BaseModel):
    subtotal: Decimal | None = Field(default=None, ge=0)
    tax_total: Decimal | None = Field(default=Decimal("0"), ge=0)
    grand_total: Decimal | None = Field(default=None, ge=0)


class SalesInvoice(SourceDocument):
    doc_type: Literal["SalesInvoice"] = "SalesInvoice"
    customer_id: str = Field(min_length=1, max_length=50)
    totals: InvoiceTotals

    def field_values(self) -> dict[str, object]:
        values = super().field_values()
        values.update({
            "customer_id": self.customer_id,
            "totals.subtotal": self.totals.subtotal,
            "totals.tax_total": self.totals.tax_total,
            "totals.grand_total": self.totals.grand_total,
        })
        return values


class PurchaseInvoice(SourceDocument):
    doc_type: Literal["PurchaseInvoice"] = "PurchaseInvoice"
    supplier_id: str = Field(min_length=1, max_length=50)
    totals: InvoiceTotals

    def field_values(self) -> dict[str, object]:
        values = super().field_values()
        values.update({
            "supplier_id": self.supplier_id,
            "totals.subtotal": self.totals.subtotal,
            "totals.tax_total": self.totals.tax_total,
            "totals.grand_total": self.totals.grand_total,
        })
        return values


class CustomerPayment(SourceDocument):
    doc_type: Literal["CustomerPayment"] = "CustomerPayment"
    customer_id: str = Field(min_length=1, max_length=50)
    amount: Decimal | None = Field(default=None, ge=0)
    # journal of the invoice this payment settles, if known
    invoice_journal_id: uuid.UUID | None = None

    def field_values(self) -> dict[str, object]:
        values = super().field_values()
        values.update({
            "customer_id": self.customer_id,
            "amount": self.amount,
        })
        return values


class SupplierPayment(SourceDocument):
    doc_type: Literal["SupplierPayment"] = "SupplierPayment"
    supplier_id: str = Field(min_length=1, max_length=50)
    amount: Decimal | None = Field(default=None, ge=0)
    invoice_journal_id: uuid.UUID | None = None

    def field_values(self) -> dict[str, object]:
        values = super().field_values()
        values.update({
            "supplier_id": self.supplier_id,
            "amount": self.amount,
        })
        return values


class StockMovement(SourceDocument):
    doc_type: Literal["StockMovement"] = "StockMovement"
    item_id: str = Field(min_length=1, max_length=50)
    quantity: Decimal = Field(gt=0)
    value: Decimal | None = Field(default=None, ge=0)

    def field_values(self) -> dict[str, object]:
        values = super().field_values()
        values.update({
            "item_id": self.item_id,
            "quantity": self.quantity,
            "value": self.value,
        })
        return values


PostingDocument = Union[
    SalesInvoice,
    PurchaseInvoice,
    CustomerPayment,
    SupplierPayment,
    StockMovement,
]
