from __future__ import annotations

from typer.testing import CliRunner

from currency_converter import cli
from currency_converter.core.config import Settings

runner = CliRunner()


def test_convert_command_prints_rounded_result(seeded_store):
    result = runner.invoke(cli.app, ["convert", "usd", "jpy", "2.5"])

    assert result.exit_code == 0, result.output
    assert "2.5 USD equals 375.0000 JPY." in result.output


def test_convert_command_rejects_unknown_code(seeded_store):
    result = runner.invoke(cli.app, ["convert", "USD", "ZZZ", "1"])

    assert result.exit_code == 1


def test_convert_command_rejects_non_numeric_amount(seeded_store):
    result = runner.invoke(cli.app, ["convert", "USD", "EUR", "lots"])

    assert result.exit_code == 2


def test_run_command_lists_currencies_and_quits(seeded_store):
    result = runner.invoke(cli.app, ["run"], input="rq")

    assert result.exit_code == 0, result.output
    assert "CurrencyID | CurrencyCode | ExchangeRate" in result.output
    assert "EUR" in result.output


def test_run_command_aborts_when_database_is_unreachable(monkeypatch, tmp_path):
    missing = tmp_path / "missing" / "currencies.db"
    monkeypatch.setattr(cli, "settings", Settings(database_url=f"sqlite:///{missing}"))

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1


def test_init_db_creates_table(monkeypatch, tmp_path):
    db_path = tmp_path / "fresh.db"
    fresh = Settings(database_url=f"sqlite:///{db_path}")
    monkeypatch.setattr(cli, "settings", fresh)

    result = runner.invoke(cli.app, ["init-db"])

    assert result.exit_code == 0, result.output
    from currency_converter.modules.currencies.store import CurrencyStore

    with CurrencyStore.connect(fresh) as store:
        assert store.fetch_all() == []


def test_run_command_aborts_on_malformed_database_url(monkeypatch):
    monkeypatch.setattr(cli, "settings", Settings(database_url="not a url"))

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1


def test_schema_creation_failure_closes_the_store(monkeypatch):
    from sqlalchemy.exc import OperationalError

    from currency_converter import bootstrap as bootstrap_mod
    from currency_converter.modules.currencies.store import CurrencyStore

    opened: list[CurrencyStore] = []
    real_connect = CurrencyStore.connect

    def _tracking_connect(settings):
        store = real_connect(settings)
        opened.append(store)
        return store

    def _denied(engine):
        raise OperationalError("CREATE TABLE currencies", {}, Exception("permission denied"))

    monkeypatch.setattr(cli.CurrencyStore, "connect", staticmethod(_tracking_connect))
    monkeypatch.setattr(bootstrap_mod, "create_schema", _denied)
    monkeypatch.setattr(cli, "settings", Settings(create_schema=True))

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1
    assert len(opened) == 1
    assert opened[0].closed
