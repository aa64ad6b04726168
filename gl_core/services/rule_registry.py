"""
Posting rule registry.

Maps each document type to the rule that turns it into journal
lines: which accounts are debited and credited, where each amount
is read from, and how the idempotency key is built. Rules are
static configuration; loading one touches neither the network
nor the database.
"""

import enum
from dataclasses import dataclass

from gl_core.exceptions import RuleNotFound
from gl_core.models.enums import PartyType
from gl_core.schemas.documents import SourceDocument


class DocumentType(str, enum.Enum):
    SALES_INVOICE = "SalesInvoice"
    PURCHASE_INVOICE = "PurchaseInvoice"
    CUSTOMER_PAYMENT = "CustomerPayment"
    SUPPLIER_PAYMENT = "SupplierPayment"
    STOCK_MOVEMENT = "StockMovement"


@dataclass(frozen=True)
class PartyRef:
    type: PartyType
    field: str


@dataclass(frozen=True)
class RuleLine:
    account: str
    amount_field: str
    party: PartyRef | None = None


@dataclass(frozen=True)
class PostingRule:
    document_type: DocumentType
    debits: tuple[RuleLine, ...]
    credits: tuple[RuleLine, ...]
    idempotency_key: tuple[str, ...] = ("doctype", "id")

    def render_key(self, document_id: str, document: SourceDocument) -> str:
        """
        Render the idempotency key template.

        "doctype" and "id" come from the posting call, "version"
        is the rule version, any other token is a document field.
        """
        values = document.field_values()
        parts = []
        for token in self.idempotency_key:
            if token == "doctype":
                parts.append(self.document_type.value)
            elif token == "id":
                parts.append(document_id)
            elif token == "version":
                parts.append("v1")
            else:
                parts.append(str(values.get(token)))
        return ":".join(parts)


_CUSTOMER = PartyRef(PartyType.CUSTOMER, "customer_id")
_SUPPLIER = PartyRef(PartyType.SUPPLIER, "supplier_id")

RULES: dict[DocumentType, PostingRule] = {
    DocumentType.SALES_INVOICE: PostingRule(
        document_type=DocumentType.SALES_INVOICE,
        debits=(
            RuleLine("AR", "totals.grand_total", _CUSTOMER),
        ),
        credits=(
            RuleLine("Revenue", "totals.subtotal"),
            RuleLine("Tax Payable", "totals.tax_total"),
        ),
    ),
    DocumentType.PURCHASE_INVOICE: PostingRule(
        document_type=DocumentType.PURCHASE_INVOICE,
        debits=(
            RuleLine("Expense", "totals.subtotal"),
            RuleLine("Tax Receivable", "totals.tax_total"),
        ),
        credits=(
            RuleLine("AP", "totals.grand_total", _SUPPLIER),
        ),
    ),
    DocumentType.CUSTOMER_PAYMENT: PostingRule(
        document_type=DocumentType.CUSTOMER_PAYMENT,
        debits=(RuleLine("Bank", "amount"),),
        credits=(RuleLine("AR", "amount", _CUSTOMER),),
    ),
    DocumentType.SUPPLIER_PAYMENT: PostingRule(
        document_type=DocumentType.SUPPLIER_PAYMENT,
        debits=(RuleLine("AP", "amount", _SUPPLIER),),
        credits=(RuleLine("Bank", "amount"),),
    ),
    DocumentType.STOCK_MOVEMENT: PostingRule(
        document_type=DocumentType.STOCK_MOVEMENT,
        debits=(RuleLine("COGS", "value"),),
        credits=(RuleLine("Inventory", "value"),),
    ),
}


def load_rule(document_type: str | DocumentType) -> PostingRule:
    """Return the posting rule for a document type code."""
    try:
        return RULES[DocumentType(document_type)]
    except (ValueError, KeyError):
        raise RuleNotFound(str(document_type)) from None
