from __future__ import annotations

import logging

from dealdesk.models.activity_log import ActivityLog
from dealdesk.models.bill import Bill
from dealdesk.models.deal import Deal
from dealdesk.repositories.base import ActivityLogRepository
from dealdesk.services.serializers import serialize_bill, serialize_deal

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, repo: ActivityLogRepository) -> None:
        self.repo = repo

    def log(
        self,
        activity_type: str,
        *,
        deal: Deal | None = None,
        bill: Bill | None = None,
        car: dict | None = None,
    ) -> ActivityLog:
        """Create an activity log entry with snapshots of the records involved. Raises on failure."""
        activity = ActivityLog(
            type=activity_type,
            deal=serialize_deal(deal) if deal is not None else None,
            bill=serialize_bill(bill) if bill is not None else None,
            car=car,
        )
        result = self.repo.create(activity)
        logger.info(
            "Activity logged: type=%s deal=%s bill=%s",
            activity_type,
            deal.id if deal is not None else None,
            bill.id if bill is not None else None,
        )
        return result

    def safe_log(self, *args, **kwargs) -> ActivityLog | None:
        """Create an activity log entry, swallowing any exceptions."""
        try:
            return self.log(*args, **kwargs)
        except Exception:
            logger.exception("Failed to write activity log")
            return None

    def list_recent(self, limit: int = 50) -> list[ActivityLog]:
        return self.repo.list_recent(limit)

    def list_by_type(self, activity_type: str, limit: int = 50) -> list[ActivityLog]:
        return self.repo.list_by_type(activity_type, limit)
