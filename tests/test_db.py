from unittest.mock import MagicMock, patch

from sqlalchemy import text

import dealdesk.db as db_module


class TestGetEngine:
    def test_creates_sqlite_engine_with_foreign_keys(self, monkeypatch):
        monkeypatch.setattr(db_module, "_engine", None)
        with patch.object(db_module, "settings") as mock_settings:
            mock_settings.db_url = "sqlite:///:memory:"
            engine = db_module.get_engine()

        assert db_module._engine is engine
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_returns_cached_engine(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_engine", sentinel)
        assert db_module.get_engine() is sentinel

    def test_is_sqlite(self):
        assert db_module.is_sqlite("sqlite:///dealdesk.db")
        assert not db_module.is_sqlite("postgresql://u:p@host/db")


class TestGetConnection:
    def test_creates_connection(self, monkeypatch):
        monkeypatch.setattr(db_module, "_connection", None)
        mock_engine = MagicMock()
        mock_conn = MagicMock()
        mock_engine.connect.return_value = mock_conn
        with patch.object(db_module, "get_engine", return_value=mock_engine):
            assert db_module.get_connection() is mock_conn

    def test_returns_cached_connection(self, monkeypatch):
        sentinel = MagicMock()
        monkeypatch.setattr(db_module, "_connection", sentinel)
        assert db_module.get_connection() is sentinel


class TestInitializeDb:
    @patch("dealdesk.db.command")
    @patch("dealdesk.db._get_alembic_config")
    def test_calls_alembic_upgrade(self, mock_config, mock_command):
        mock_cfg = MagicMock()
        mock_config.return_value = mock_cfg
        db_module.initialize_db()
        mock_command.upgrade.assert_called_once_with(mock_cfg, "head")
