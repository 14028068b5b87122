from unittest.mock import MagicMock

from dealdesk.models.activity_log import ActivityLog, ActivityType
from dealdesk.models.bill import Bill
from dealdesk.models.deal import Deal
from dealdesk.services.activity_service import ActivityService


class TestActivityServiceLog:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_repo.create.side_effect = lambda log: log.model_copy(update={"id": 1})
        self.service = ActivityService(self.mock_repo)

    def test_log_deal_snapshot(self):
        deal = Deal(id=3, title="Mazda 3", deal_type="exchange", selling_price=1000, bills=[Bill(id=1)])

        result = self.service.log(ActivityType.DEAL_CREATED, deal=deal)

        assert result.id == 1
        created = self.mock_repo.create.call_args[0][0]
        assert created.type == "deal_created"
        assert created.deal["id"] == 3
        assert created.deal["title"] == "Mazda 3"
        assert "bills" not in created.deal
        assert created.bill is None
        assert created.car is None

    def test_log_bill_with_deal(self):
        deal = Deal(id=3, title="Mazda 3")
        bill = Bill(id=8, deal_id=3, cash_amount="400")

        self.service.log(ActivityType.BILL_CREATED, deal=deal, bill=bill)

        created = self.mock_repo.create.call_args[0][0]
        assert created.deal["id"] == 3
        assert created.bill["id"] == 8
        assert created.bill["cash_amount"] == "400"

    def test_log_car(self):
        self.service.log(ActivityType.CAR_ADDED, car={"plate": "12-345-67"})
        created = self.mock_repo.create.call_args[0][0]
        assert created.car == {"plate": "12-345-67"}


class TestActivityServiceSafeLog:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.service = ActivityService(self.mock_repo)

    def test_safe_log_returns_entry(self):
        self.mock_repo.create.return_value = ActivityLog(id=1, type="deal_deleted")
        assert self.service.safe_log(ActivityType.DEAL_DELETED, deal=Deal(id=1)).id == 1

    def test_safe_log_swallows_errors(self):
        self.mock_repo.create.side_effect = RuntimeError("db locked")
        assert self.service.safe_log(ActivityType.DEAL_DELETED, deal=Deal(id=1)) is None


class TestActivityServiceQueries:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.service = ActivityService(self.mock_repo)

    def test_list_recent(self):
        self.mock_repo.list_recent.return_value = [ActivityLog(id=1, type="deal_created")]
        assert len(self.service.list_recent(10)) == 1
        self.mock_repo.list_recent.assert_called_once_with(10)

    def test_list_by_type(self):
        self.mock_repo.list_by_type.return_value = []
        assert self.service.list_by_type(ActivityType.BILL_DELETED) == []
        self.mock_repo.list_by_type.assert_called_once_with("bill_deleted", 50)
