import asyncio

import pytest
from click.testing import CliRunner

from book_cli.constants import CONFIG_DIR_ENV
from book_cli.db.purchases import PurchaseStore


@pytest.fixture
def app_dir(tmp_path, monkeypatch):
    """Point the app dir, and with it config and database, at tmp_path."""
    path = tmp_path / "app"
    path.mkdir()
    monkeypatch.setenv(CONFIG_DIR_ENV, str(path))
    return path


@pytest.fixture
def db_path(app_dir):
    return app_dir / "books.db"


@pytest.fixture
def run_store(db_path):
    """Run ``fn(store)`` against an opened store and return its result."""
    def _run(fn):
        async def go():
            async with PurchaseStore(db_path) as store:
                return await fn(store)
        return asyncio.run(go())
    return _run


@pytest.fixture
def runner(app_dir):
    return CliRunner()
