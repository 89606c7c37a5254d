"""Root conftest - test settings, logging sink and the per-test app fixture.

Without APP_DATABASE__* overrides the suite runs against SQLite files in the
system temp directory. Point APP_DATABASE__DRIVER=postgresql+asyncpg and the
host/credential variables at a server to run it against PostgreSQL.

TEST_LOG=1 streams the application logs to stdout.
"""

import logging
import os
import sys
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("APP_DATABASE__DRIVER", "sqlite+aiosqlite")
os.environ.setdefault(
    "APP_DATABASE__DATABASE_NAME",
    str(Path(tempfile.gettempdir()) / "newsletter-tests" / "newsletter.sqlite3"),
)

from newsletter.config import get_settings  # noqa: E402
from newsletter.infrastructure.observability import setup_logging  # noqa: E402
from tests.harness import spawn_app  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _logging():
    """Initialise logging once per test process."""
    if os.environ.get("TEST_LOG"):
        setup_logging("DEBUG", "text", stream=sys.stdout)
        yield
        return
    with open(os.devnull, "w") as sink:
        handler = setup_logging("INFO", "json", stream=sink)
        yield
        logging.root.removeHandler(handler)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
async def app(settings):
    """A live server on an ephemeral port backed by a fresh database."""
    async with spawn_app(settings) as test_app:
        yield test_app


def _app_handlers() -> list[logging.Handler]:
    return [h for h in logging.root.handlers if h.get_name() == "newsletter"]


@pytest.fixture
def restore_log_handlers():
    """Put the application log handler back after a test replaced it."""
    saved = _app_handlers()
    yield
    for handler in _app_handlers():
        logging.root.removeHandler(handler)
    for handler in saved:
        logging.root.addHandler(handler)
