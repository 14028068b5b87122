from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from dealdesk.models.bill import Bill, RawAmount


class DealType(str, Enum):
    NEW_USED_SALE = "new_used_sale"
    NEW_SALE = "new_sale"
    USED_SALE = "used_sale"
    NEW_USED_SALE_TAX_INCLUSIVE = "new_used_sale_tax_inclusive"
    EXCHANGE = "exchange"
    INTERMEDIARY = "intermediary"
    FINANCING_ASSISTANCE_INTERMEDIARY = "financing_assistance_intermediary"
    COMPANY_COMMISSION = "company_commission"


class DealStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


LOCKED_STATUSES = {DealStatus.COMPLETED.value, DealStatus.CANCELLED.value}


class Deal(BaseModel):
    id: int | None = None
    uuid: str = ""
    title: str = ""
    description: str = ""
    deal_type: str = DealType.NEW_USED_SALE.value
    status: str = DealStatus.PENDING.value
    selling_price: RawAmount = None
    amount: RawAmount = None  # legacy
    customer_car_eval_value: RawAmount = None
    customer_id: int | None = None
    seller_id: int | None = None
    buyer_id: int | None = None
    car_id: int | None = None
    bills: list[Bill] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_exchange(self) -> bool:
        return self.deal_type == DealType.EXCHANGE.value

    @property
    def is_editable(self) -> bool:
        """Completed and cancelled deals are read-only."""
        return self.status not in LOCKED_STATUSES
