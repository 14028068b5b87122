from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ActivityType:
    """String constants for all activity log types."""

    CAR_ADDED = "car_added"
    CAR_UPDATED = "car_updated"
    CAR_DELETED = "car_deleted"

    DEAL_CREATED = "deal_created"
    DEAL_UPDATED = "deal_updated"
    DEAL_DELETED = "deal_deleted"

    BILL_CREATED = "bill_created"
    BILL_UPDATED = "bill_updated"
    BILL_DELETED = "bill_deleted"

    CUSTOMER_ADDED = "customer_added"
    CUSTOMER_UPDATED = "customer_updated"
    CUSTOMER_DELETED = "customer_deleted"

    PROVIDER_ADDED = "provider_added"
    PROVIDER_UPDATED = "provider_updated"
    PROVIDER_DELETED = "provider_deleted"


class ActivityLog(BaseModel):
    id: int | None = None
    uuid: str = ""
    type: str
    deal: dict | None = None  # JSON snapshot
    bill: dict | None = None
    car: dict | None = None
    created_at: datetime | None = None
