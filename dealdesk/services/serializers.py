"""Convert models to JSON-safe dicts for activity log snapshots.

Decimals become strings and datetimes ISO 8601 strings.
"""

from __future__ import annotations

from dealdesk.models.bill import Bill
from dealdesk.models.deal import Deal


def serialize_bill(bill: Bill) -> dict:
    return bill.model_dump(mode="json")


def serialize_deal(deal: Deal, include_bills: bool = False) -> dict:
    """Serialize a Deal. Bills are left out unless asked for; they get their own entries."""
    exclude = None if include_bills else {"bills"}
    return deal.model_dump(mode="json", exclude=exclude)
