"""Deal balance calculation.

A deal starts as a debt equal to its selling price. Exchange deals get the
appraised trade-in value as a credit. Receipts then move the balance toward
(and possibly past) zero; a positive balance means the customer overpaid.

Every function here is pure and never raises on malformed amounts: unreadable
values count as zero. Records may be pydantic models or plain mappings as
returned by the store.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from dealdesk.models import ZERO, to_decimal_or_zero
from dealdesk.models.bill import LEGACY_AMOUNT_FIELDS, BillDirection, BillType
from dealdesk.models.deal import DealType

PAYMENTS = "payments"
LEGACY = "legacy"

_LEGACY_LABELS = {
    "visa_amount": "Visa",
    "transfer_amount": "Transfer",
    "check_amount": "Check",
    "cash_amount": "Cash",
    "bank_amount": "Bank",
}


def _field(record: object, name: str) -> object:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _payments(bill: object) -> list:
    payments = _field(bill, "bill_payments")
    if not payments:
        # some joins name the relation "payments"
        payments = _field(bill, "payments")
    return list(payments or [])


@dataclass(frozen=True)
class BillAmount:
    """A bill's amount after resolving which of its two shapes applies."""

    source: str  # PAYMENTS or LEGACY
    total: Decimal


def normalize_bill(bill: object) -> BillAmount:
    payments = _payments(bill)
    if payments:
        return BillAmount(PAYMENTS, sum((to_decimal_or_zero(_field(p, "amount")) for p in payments), ZERO))
    total = sum((to_decimal_or_zero(_field(bill, name)) for name in LEGACY_AMOUNT_FIELDS), ZERO)
    return BillAmount(LEGACY, total)


def extract_bill_amount(bill: object) -> Decimal:
    """Total money a bill carries. Itemized payments win over the flat fields."""
    return normalize_bill(bill).total


def bill_effect(bill: object) -> int:
    """Multiplier applied to a bill's absolute amount when folding a balance.

    Only receipts move a deal balance. On a combined tax invoice + receipt the
    direction is accounting metadata, so the receipt part always counts as a
    payment. On a plain receipt the direction is the cash-flow sign.
    """
    bill_type = _field(bill, "bill_type")
    if bill_type == BillType.TAX_INVOICE_RECEIPT.value:
        return 1
    if bill_type == BillType.RECEIPT_ONLY.value:
        if _field(bill, "bill_direction") == BillDirection.NEGATIVE.value:
            return -1
        return 1
    return 0


def signed_bill_amount(bill: object) -> Decimal:
    effect = bill_effect(bill)
    if effect == 0:
        return ZERO
    return effect * abs(extract_bill_amount(bill))


def deal_price(deal: object) -> Decimal:
    price = _field(deal, "selling_price")
    if price is None:
        price = _field(deal, "amount")
    return to_decimal_or_zero(price)


def trade_in_credit(deal: object) -> Decimal:
    if _field(deal, "deal_type") != DealType.EXCHANGE.value:
        return ZERO
    return abs(to_decimal_or_zero(_field(deal, "customer_car_eval_value")))


def compute_deal_balance(deal: object, bills: Iterable[object] | None = None) -> Decimal:
    """Signed balance of a deal: negative is debt left, positive is overpayment.

    When ``bills`` is None the deal's own joined ``bills`` are used.
    """
    balance = -abs(deal_price(deal)) + trade_in_credit(deal)

    if bills is None:
        bills = _field(deal, "bills")
    if not bills:
        return balance

    for bill in bills:
        balance += signed_bill_amount(bill)
    return balance


def payment_description(bill: object, symbol: str = "₪") -> str:
    """Readable breakdown of a bill's payments, e.g. 'cash: ₪200, visa: ₪50'."""
    descriptions: list[str] = []
    payments = _payments(bill)
    if payments:
        for payment in payments:
            amount = to_decimal_or_zero(_field(payment, "amount"))
            if amount > 0:
                descriptions.append(f"{_field(payment, 'payment_type')}: {symbol}{amount}")
        return ", ".join(descriptions) or "Payment"

    for name in LEGACY_AMOUNT_FIELDS:
        amount = to_decimal_or_zero(_field(bill, name))
        if amount > 0:
            descriptions.append(f"{_LEGACY_LABELS[name]}: {symbol}{amount}")
    return ", ".join(descriptions) or "Payment"
