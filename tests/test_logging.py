import logging
from unittest.mock import patch

import pytest

from dealdesk.logging import QUIET_LOGGERS, TEXT_FORMAT, configure_logging, reconfigure


@pytest.fixture
def mock_settings():
    with patch("dealdesk.logging.settings") as mock:
        mock.log_level = "INFO"
        mock.log_json = False
        mock.log_file = ""
        yield mock
    _remove_root_handlers()


def _remove_root_handlers():
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


class TestConfigureLogging:
    def test_json_format(self, mock_settings):
        mock_settings.log_json = True
        configure_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        from pythonjsonlogger.json import JsonFormatter

        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_json_record_carries_app_name(self, mock_settings, tmp_path):
        import json

        log_path = tmp_path / "dealdesk.log"
        mock_settings.log_json = True
        mock_settings.log_file = str(log_path)
        configure_logging()

        logging.getLogger("dealdesk.services.deal_service").info("Deal deleted: id=%s", 7)
        logging.getLogger().handlers[0].flush()

        record = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
        assert record["app"] == "dealdesk"
        assert record["level"] == "INFO"
        assert record["message"] == "Deal deleted: id=7"
        assert "timestamp" in record

    def test_text_format(self, mock_settings):
        mock_settings.log_level = "debug"
        configure_logging()

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert root.handlers[0].formatter._fmt == TEXT_FORMAT
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_log_file(self, mock_settings, tmp_path):
        log_path = tmp_path / "dealdesk.log"
        mock_settings.log_file = str(log_path)
        configure_logging()

        logging.getLogger("dealdesk.db").warning("Migrations complete")
        logging.getLogger().handlers[0].flush()

        assert isinstance(logging.getLogger().handlers[0], logging.FileHandler)
        assert "WARNING dealdesk.db: Migrations complete" in log_path.read_text(encoding="utf-8")

    def test_level_argument_overrides_settings(self, mock_settings):
        mock_settings.log_level = "ERROR"
        configure_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize("level", ["LOUD", "basic_format", ""])
    def test_unknown_level_falls_back_to_info(self, mock_settings, level):
        mock_settings.log_level = level
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_reconfigure_replaces_handlers(self, mock_settings):
        configure_logging()
        logging.getLogger().addHandler(logging.NullHandler())
        reconfigure()
        assert len(logging.getLogger().handlers) == 1

    def test_third_party_loggers_quieted(self, mock_settings):
        mock_settings.log_level = "DEBUG"
        reconfigure()

        assert logging.getLogger("alembic.runtime.migration").level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING
        assert set(QUIET_LOGGERS) >= {"alembic.runtime.migration", "botocore", "boto3"}
