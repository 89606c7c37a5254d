"""Configuration - connection string composition and environment parsing."""

import pytest
from pydantic import ValidationError

from newsletter.config import DatabaseSettings, Settings


def test_connection_string_composes_all_parts():
    db = DatabaseSettings(
        host="db.internal", port=6543, username="app",
        password="s3cret", database_name="newsletter",
    )
    url = db.connection_string()

    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "db.internal"
    assert url.port == 6543
    assert url.username == "app"
    assert url.password == "s3cret"
    assert url.database == "newsletter"


def test_with_database_keeps_server_and_credentials():
    db = DatabaseSettings(host="db.internal", username="app", password="pw")
    url = db.with_database("test_db_abc")

    assert url.database == "test_db_abc"
    assert url.host == "db.internal"
    assert url.username == "app"


def test_without_database_targets_maintenance_db():
    assert DatabaseSettings().without_database().database == "postgres"


def test_password_not_rendered_in_repr():
    db = DatabaseSettings(password="s3cret")
    assert "s3cret" not in repr(db)
    assert "s3cret" not in str(db.connection_string())


@pytest.mark.parametrize("driver", ["postgres", "postgresql"])
def test_plain_postgres_driver_is_upgraded_to_asyncpg(driver):
    assert DatabaseSettings(driver=driver).driver == "postgresql+asyncpg"


def test_sqlite_url_uses_database_as_path():
    db = DatabaseSettings(driver="sqlite+aiosqlite", database_name="/tmp/x.sqlite3")

    assert db.is_sqlite
    url = db.connection_string()
    assert url.database == "/tmp/x.sqlite3"
    assert url.host is None


def test_settings_read_nested_environment(monkeypatch):
    monkeypatch.setenv("APP_DATABASE__DRIVER", "postgresql+asyncpg")
    monkeypatch.setenv("APP_DATABASE__HOST", "pg.example")
    monkeypatch.setenv("APP_DATABASE__PORT", "15432")
    monkeypatch.setenv("APP_APPLICATION__PORT", "9000")
    monkeypatch.setenv("APP_LOG_FORMAT", "text")

    settings = Settings(_env_file=None)

    assert settings.database.host == "pg.example"
    assert settings.database.port == 15432
    assert settings.application.port == 9000
    assert settings.log_format == "text"


def test_invalid_port_fails_fast(monkeypatch):
    monkeypatch.setenv("APP_DATABASE__PORT", "not-a-port")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
