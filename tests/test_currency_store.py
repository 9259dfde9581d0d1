from __future__ import annotations

import pytest

from currency_converter.core.config import Settings
from currency_converter.modules.currencies.errors import (
    StoreConnectionError,
    StoreOperationError,
)
from currency_converter.modules.currencies.store import CurrencyStore


def test_insert_and_fetch_all_in_id_order(store):
    usd = store.insert("USD", 1.0)
    eur = store.insert("EUR", 0.9)

    records = store.fetch_all()

    assert [(r.id, r.code, r.rate) for r in records] == [
        (usd.id, "USD", 1.0),
        (eur.id, "EUR", 0.9),
    ]
    assert usd.id != eur.id


def test_update_rewrites_matching_row(seeded_store):
    eur = next(r for r in seeded_store.fetch_all() if r.code == "EUR")

    seeded_store.update(eur.id, "EUX", 0.95)

    updated = next(r for r in seeded_store.fetch_all() if r.id == eur.id)
    assert (updated.code, updated.rate) == ("EUX", 0.95)
    assert len(seeded_store.fetch_all()) == 3


def test_delete_removes_matching_row(seeded_store):
    usd = next(r for r in seeded_store.fetch_all() if r.code == "USD")

    seeded_store.delete(usd.id)

    assert "USD" not in {r.code for r in seeded_store.fetch_all()}


def test_update_and_delete_of_missing_row_fail(store):
    with pytest.raises(StoreOperationError):
        store.update(999, "ABC", 1.0)
    with pytest.raises(StoreOperationError):
        store.delete(999)


def test_backend_rejection_is_wrapped_and_store_stays_usable(store):
    with pytest.raises(StoreOperationError):
        store.insert("ABC", None)

    store.insert("USD", 1.0)
    assert [r.code for r in store.fetch_all()] == ["USD"]


def test_close_is_idempotent_and_blocks_further_use(store):
    store.close()
    store.close()

    assert store.closed
    with pytest.raises(StoreOperationError):
        store.fetch_all()


def test_connect_failure_raises_connection_error(tmp_path):
    missing = tmp_path / "no-such-dir" / "currencies.db"
    with pytest.raises(StoreConnectionError):
        CurrencyStore.connect(Settings(database_url=f"sqlite:///{missing}"))


def test_settings_build_url_from_connection_fields():
    settings = Settings(
        database_url=None,
        db_host="db.internal",
        db_port=3307,
        db_user="app",
        db_password="secret",
        db_name="fx",
    )
    url = settings.sqlalchemy_url()

    assert url.drivername == "mysql+pymysql"
    assert (url.host, url.port, url.username, url.database) == ("db.internal", 3307, "app", "fx")


@pytest.mark.parametrize("database_url", ["not a url", "nosuchdb://u@h/x"])
def test_unusable_database_url_raises_connection_error(database_url):
    with pytest.raises(StoreConnectionError):
        CurrencyStore.connect(Settings(database_url=database_url))
