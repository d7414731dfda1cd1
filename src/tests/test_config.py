from rolesapi.config import Settings
from rolesapi.db import DatabaseManager


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://app:pw@db:5432/roles")
    monkeypatch.setenv("SQL_ECHO", "true")
    settings = Settings(_env_file=None)
    assert settings.database_url == "postgresql+psycopg2://app:pw@db:5432/roles"
    assert settings.sql_echo is True


def test_default_is_sqlite(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url.startswith("sqlite")


def test_sqlite_engine_enforces_foreign_keys(tmp_path):
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'roles.db'}")
    engine = manager.get_engine()
    with engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
    engine.dispose()
