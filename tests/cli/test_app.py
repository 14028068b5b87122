from datetime import datetime
from unittest.mock import MagicMock, patch

from dealdesk.models.activity_log import ActivityLog


class TestBuildServices:
    @patch("dealdesk.cli.app.get_storage")
    @patch("dealdesk.cli.app.get_deal_repository")
    @patch("dealdesk.cli.app.get_bill_repository")
    @patch("dealdesk.cli.app.get_customer_repository")
    @patch("dealdesk.cli.app.get_customer_transaction_repository")
    @patch("dealdesk.cli.app.get_activity_log_repository")
    def test_returns_correct_types(self, *mocks):
        from dealdesk.cli.app import _build_services
        from dealdesk.services.activity_service import ActivityService
        from dealdesk.services.deal_service import DealService

        deal_svc, activity_svc = _build_services()
        assert isinstance(deal_svc, DealService)
        assert isinstance(activity_svc, ActivityService)
        assert deal_svc.activity is activity_svc


class TestShowRecentActivity:
    def test_empty(self):
        from dealdesk.cli.app import show_recent_activity

        service = MagicMock()
        service.list_recent.return_value = []
        show_recent_activity(service)
        service.list_recent.assert_called_once_with(20)

    def test_entries(self):
        from dealdesk.cli.app import show_recent_activity

        service = MagicMock()
        service.list_recent.return_value = [
            ActivityLog(id=1, type="deal_created", deal={"title": "Civic"}, created_at=datetime(2025, 3, 1, 10, 0)),
            ActivityLog(id=2, type="bill_deleted", bill={"id": 4}),
        ]
        show_recent_activity(service, limit=5)
        service.list_recent.assert_called_once_with(5)


class TestMainMenu:
    @patch("dealdesk.cli.app._build_services")
    @patch("dealdesk.cli.app.questionary")
    def test_exit_immediately(self, mock_q, mock_build):
        from dealdesk.cli.app import main_menu

        mock_build.return_value = (MagicMock(), MagicMock())
        mock_q.select.return_value.ask.return_value = "Exit"

        main_menu()
        mock_q.select.return_value.ask.assert_called_once()

    @patch("dealdesk.cli.app._build_services")
    @patch("dealdesk.cli.app.questionary")
    def test_none_exits(self, mock_q, mock_build):
        from dealdesk.cli.app import main_menu

        mock_build.return_value = (MagicMock(), MagicMock())
        mock_q.select.return_value.ask.return_value = None
        main_menu()

    @patch("dealdesk.cli.app._build_services")
    @patch("dealdesk.cli.app.questionary")
    @patch("dealdesk.cli.app.list_deals_menu")
    def test_list_deals(self, mock_list, mock_q, mock_build):
        from dealdesk.cli.app import main_menu

        deal_service = MagicMock()
        mock_build.return_value = (deal_service, MagicMock())
        mock_q.select.return_value.ask.side_effect = ["List Deals", "Exit"]

        main_menu()
        mock_list.assert_called_once_with(deal_service)

    @patch("dealdesk.cli.app._build_services")
    @patch("dealdesk.cli.app.questionary")
    @patch("dealdesk.cli.app.create_deal_menu")
    def test_new_deal(self, mock_create, mock_q, mock_build):
        from dealdesk.cli.app import main_menu

        mock_build.return_value = (MagicMock(), MagicMock())
        mock_q.select.return_value.ask.side_effect = ["New Deal", "Exit"]

        main_menu()
        mock_create.assert_called_once()

    @patch("dealdesk.cli.app._build_services")
    @patch("dealdesk.cli.app.questionary")
    @patch("dealdesk.cli.app.show_recent_activity")
    def test_recent_activity(self, mock_show, mock_q, mock_build):
        from dealdesk.cli.app import main_menu

        activity_service = MagicMock()
        mock_build.return_value = (MagicMock(), activity_service)
        mock_q.select.return_value.ask.side_effect = ["Recent Activity", "Exit"]

        main_menu()
        mock_show.assert_called_once_with(activity_service)


class TestMain:
    @patch("dealdesk.__main__.main_menu")
    @patch("dealdesk.__main__.reconfigure")
    @patch("dealdesk.__main__.initialize_db")
    @patch("dealdesk.__main__.configure_logging")
    def test_startup_order(self, mock_logging, mock_init, mock_reconfigure, mock_menu):
        from dealdesk.__main__ import main

        manager = MagicMock()
        manager.attach_mock(mock_logging, "configure_logging")
        manager.attach_mock(mock_init, "initialize_db")
        manager.attach_mock(mock_reconfigure, "reconfigure")
        manager.attach_mock(mock_menu, "main_menu")

        main()

        assert [c[0] for c in manager.mock_calls] == ["configure_logging", "initialize_db", "reconfigure", "main_menu"]
