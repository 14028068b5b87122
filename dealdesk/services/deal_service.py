from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel

from dealdesk.models.activity_log import ActivityType
from dealdesk.models.bill import Bill
from dealdesk.models.customer import Customer
from dealdesk.models.deal import Deal
from dealdesk.repositories.base import BillRepository, CustomerRepository, DealRepository
from dealdesk.services.activity_service import ActivityService
from dealdesk.services.balance import compute_deal_balance
from dealdesk.services.ledger_service import LedgerService, customer_id_for_deal
from dealdesk.services.table import (
    DESC,
    PAGE_SIZES,
    Filter,
    SortSpec,
    TableState,
    date_range,
    equals,
    in_range,
    search,
)
from dealdesk.storage.base import StorageBackend
from dealdesk.storage.factory import deal_folder

logger = logging.getLogger(__name__)


class DealLockedError(Exception):
    """Raised when changing a completed or cancelled deal."""

    def __init__(self, deal: Deal) -> None:
        super().__init__(f"Deal {deal.id} is {deal.status} and cannot be changed")
        self.deal = deal


class DealRow(BaseModel):
    """One line of the deals list: the deal, who it belongs to and what is still owed."""

    deal: Deal
    customer_name: str = ""
    balance: Decimal


def deal_filters() -> list[Filter]:
    return [
        Filter("search", search("deal.title", "deal.description", "deal.deal_type", "deal.status", "customer_name")),
        Filter("deal_type", equals("deal.deal_type")),
        Filter("status", equals("deal.status")),
        Filter("selling_price", in_range("deal.selling_price")),
        Filter("date", date_range("deal.created_at")),
        Filter("seller_id", equals("deal.seller_id")),
        Filter("buyer_id", equals("deal.buyer_id")),
    ]


def deal_table_state(page_size: int = PAGE_SIZES[0]) -> TableState:
    """Newest deals first, like the deals list screen."""
    return TableState(deal_filters(), SortSpec("deal.created_at", DESC), page_size)


class DealService:
    def __init__(
        self,
        deal_repo: DealRepository,
        bill_repo: BillRepository,
        storage: StorageBackend,
        ledger: LedgerService,
        activity: ActivityService,
        customer_repo: CustomerRepository | None = None,
    ) -> None:
        self.deal_repo = deal_repo
        self.bill_repo = bill_repo
        self.storage = storage
        self.ledger = ledger
        self.activity = activity
        self.customer_repo = customer_repo

    def create_deal(self, deal: Deal) -> Deal:
        deal = self.deal_repo.create(deal)
        logger.info("Deal created: id=%s, type=%s, price=%s", deal.id, deal.deal_type, deal.selling_price)

        self.ledger.handle_deal_created(deal)
        if deal.is_exchange:
            self.ledger.handle_exchange_car_credit(deal)

        self.activity.safe_log(ActivityType.DEAL_CREATED, deal=deal)
        return deal

    def update_deal(self, deal: Deal) -> Deal:
        if deal.id is None:
            raise ValueError("Cannot update deal without an id")
        existing = self.deal_repo.get_by_id(deal.id)
        if existing is None:
            raise ValueError(f"Deal {deal.id} not found")
        if not existing.is_editable:
            raise DealLockedError(existing)

        deal = self.deal_repo.update(deal)
        logger.info("Deal updated: id=%s", deal.id)
        self.activity.safe_log(ActivityType.DEAL_UPDATED, deal=deal)
        return deal

    def change_status(self, deal: Deal, status: str) -> Deal:
        if deal.id is None:
            raise ValueError("Cannot change status of deal without an id")
        existing = self.deal_repo.get_by_id(deal.id)
        if existing is None:
            raise ValueError(f"Deal {deal.id} not found")
        if not existing.is_editable:
            raise DealLockedError(existing)
        self.deal_repo.update_status(existing.id, status)
        existing.status = status
        logger.info("Deal %s marked as %s", existing.id, status)
        self.activity.safe_log(ActivityType.DEAL_UPDATED, deal=existing)
        return existing

    def delete_deal(self, deal_id: int) -> bool:
        """Delete a deal and run its side effects exactly once.

        Returns False when the deal does not exist (or was already deleted),
        in which case nothing else happens.
        """
        deal = self.deal_repo.get_by_id(deal_id)
        if deal is None:
            logger.warning("delete_deal: deal %s not found", deal_id)
            return False
        if not deal.is_editable:
            raise DealLockedError(deal)

        # Logged first so the snapshot still has the full deal.
        self.activity.safe_log(ActivityType.DEAL_DELETED, deal=deal)

        self.deal_repo.delete(deal_id)
        logger.info("Deal deleted: id=%s", deal_id)

        self.ledger.handle_deal_deleted(deal)

        folder = deal_folder(deal_id)
        try:
            self.storage.delete_prefix(folder)
        except Exception:
            logger.exception("Could not delete files for deal %s (folder=%s)", deal_id, folder)

        return True

    def delete_deals(self, deal_ids: list[int]) -> int:
        """Delete several deals, skipping locked ones. Returns how many were deleted."""
        deleted = 0
        for deal_id in deal_ids:
            try:
                if self.delete_deal(deal_id):
                    deleted += 1
            except DealLockedError as exc:
                logger.warning("delete_deals: skipping locked deal %s (%s)", deal_id, exc.deal.status)
        logger.info("Bulk delete removed %d of %d deals", deleted, len(deal_ids))
        return deleted

    def get_deal(self, deal_id: int) -> Deal | None:
        result = self.deal_repo.get_by_id(deal_id)
        logger.debug("get_deal id=%s found=%s", deal_id, result is not None)
        return result

    def get_deal_by_uuid(self, uuid: str) -> Deal | None:
        result = self.deal_repo.get_by_uuid(uuid)
        logger.debug("get_deal_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def deal_balance(self, deal: Deal) -> Decimal:
        return compute_deal_balance(deal, deal.bills)

    def list_customers(self) -> list[Customer]:
        if self.customer_repo is None:
            return []
        return self.customer_repo.list_all()

    def _customer_names(self) -> dict[int, str]:
        return {c.id: c.name for c in self.list_customers() if c.id is not None}

    def list_deal_rows(self) -> list[DealRow]:
        deals = self.deal_repo.list_all()
        names = self._customer_names()
        rows = [
            DealRow(
                deal=deal,
                customer_name=names.get(customer_id_for_deal(deal) or 0, ""),
                balance=compute_deal_balance(deal, deal.bills),
            )
            for deal in deals
        ]
        logger.debug("Listed %d deals", len(rows))
        return rows

    def add_bill(self, deal: Deal, bill: Bill) -> Bill:
        if deal.id is None:
            raise ValueError("Cannot add bill to deal without an id")
        if not deal.is_editable:
            raise DealLockedError(deal)

        bill.deal_id = deal.id
        bill = self.bill_repo.create(bill)
        logger.info("Bill created: id=%s, deal=%s, type=%s", bill.id, deal.id, bill.bill_type)

        if bill.affects_balance:
            self.ledger.handle_receipt_created(bill, deal)
        deal.bills = [*deal.bills, bill]

        self.activity.safe_log(ActivityType.BILL_CREATED, deal=deal, bill=bill)
        return bill

    def delete_bill(self, bill_id: int) -> bool:
        bill = self.bill_repo.get_by_id(bill_id)
        if bill is None:
            logger.warning("delete_bill: bill %s not found", bill_id)
            return False
        deal = self.deal_repo.get_by_id(bill.deal_id) if bill.deal_id is not None else None
        if deal is not None and not deal.is_editable:
            raise DealLockedError(deal)

        self.activity.safe_log(ActivityType.BILL_DELETED, deal=deal, bill=bill)
        self.bill_repo.delete(bill_id)
        logger.info("Bill deleted: id=%s", bill_id)

        if deal is not None and bill.affects_balance:
            self.ledger.handle_receipt_deleted(bill, deal)
        return True
