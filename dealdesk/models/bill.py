from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

# Raw amount as stored: legacy rows hold strings, newer rows numbers.
RawAmount = Decimal | int | float | str | None


class BillType(str, Enum):
    TAX_INVOICE = "tax_invoice"
    RECEIPT_ONLY = "receipt_only"
    TAX_INVOICE_RECEIPT = "tax_invoice_receipt"
    GENERAL = "general"


class BillDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class PaymentType(str, Enum):
    CASH = "cash"
    VISA = "visa"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"


LEGACY_AMOUNT_FIELDS = ("visa_amount", "transfer_amount", "check_amount", "cash_amount", "bank_amount")

BALANCE_BILL_TYPES = {BillType.RECEIPT_ONLY.value, BillType.TAX_INVOICE_RECEIPT.value}


class BillPayment(BaseModel):
    id: int | None = None
    bill_id: int | None = None
    payment_type: str = PaymentType.CASH.value
    amount: RawAmount = 0
    created_at: datetime | None = None


class Bill(BaseModel):
    id: int | None = None
    uuid: str = ""
    deal_id: int | None = None
    bill_type: str = BillType.RECEIPT_ONLY.value
    bill_direction: str | None = BillDirection.POSITIVE.value
    customer_name: str = ""
    visa_amount: RawAmount = None
    transfer_amount: RawAmount = None
    check_amount: RawAmount = None
    cash_amount: RawAmount = None
    bank_amount: RawAmount = None
    bill_amount: RawAmount = None  # general bills
    total_with_tax: RawAmount = None  # tax invoices
    bill_payments: list[BillPayment] = []
    created_at: datetime | None = None

    @property
    def affects_balance(self) -> bool:
        return self.bill_type in BALANCE_BILL_TYPES
