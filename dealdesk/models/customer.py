from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class TransactionType(str, Enum):
    DEAL_CREATED = "deal_created"
    DEAL_DELETED = "deal_deleted"
    RECEIPT_CREATED = "receipt_created"
    RECEIPT_DELETED = "receipt_deleted"


class Customer(BaseModel):
    id: int | None = None
    uuid: str = ""
    name: str
    id_number: str = ""
    phone: str = ""
    balance: Decimal = Decimal(0)  # negative: customer owes
    created_at: datetime | None = None


class CustomerTransaction(BaseModel):
    id: int | None = None
    customer_id: int
    type: TransactionType
    amount: Decimal  # positive credits, negative debits
    balance_before: Decimal
    balance_after: Decimal
    reference_id: str = ""
    description: str = ""
    created_at: datetime | None = None
