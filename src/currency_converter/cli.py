from __future__ import annotations

from decimal import DecimalException

import typer
from sqlalchemy.exc import SQLAlchemyError

from currency_converter.bootstrap import bootstrap, create_schema
from currency_converter.console.menu import run_interactive
from currency_converter.console.terminal import ConsoleIO
from currency_converter.core.config import settings
from currency_converter.core.db import build_engine
from currency_converter.core.logging import get_logger, log_exception
from currency_converter.modules.currencies.cache import CurrencyCache
from currency_converter.modules.currencies.errors import (
    ConversionError,
    CurrencyNotFound,
    StoreConnectionError,
    StoreOperationError,
)
from currency_converter.modules.currencies.service import convert, format_conversion
from currency_converter.modules.currencies.store import CurrencyStore
from currency_converter.modules.currencies.validation import validate_amount, validate_existing_code

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Currency Converter")


def _open_store() -> CurrencyStore:
    try:
        store = CurrencyStore.connect(settings)
    except StoreConnectionError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    try:
        bootstrap(store.engine, settings)
    except SQLAlchemyError as exc:
        log_exception(logger, "bootstrap.schema.failure")
        store.close()
        typer.secho(f"Could not create schema: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    return store


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Run the interactive menu when no command is given."""
    if ctx.invoked_subcommand is None:
        run()


@app.command("run")
def run() -> None:
    """Start the interactive currency menu."""
    store = _open_store()
    try:
        run_interactive(store, ConsoleIO())
    except StoreOperationError as exc:
        typer.secho(f"Could not load currencies: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command("convert")
def convert_command(
    from_code: str = typer.Argument(..., help="Currency code to convert from, e.g. USD"),
    to_code: str = typer.Argument(..., help="Currency code to convert to, e.g. EUR"),
    amount: str = typer.Argument(..., help="Amount to convert, e.g. 10.5"),
) -> None:
    """Convert an amount once and exit."""
    parsed = validate_amount(amount)
    if not parsed.ok:
        raise typer.BadParameter(parsed.error, param_hint="AMOUNT")

    with _open_store() as store:
        cache = CurrencyCache()
        try:
            cache.reload(store)
        except StoreOperationError as exc:
            typer.secho(f"Could not load currencies: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        codes = cache.codes()
        checked = [validate_existing_code(raw, codes) for raw in (from_code, to_code)]
        for result in checked:
            if not result.ok:
                typer.secho(f"Error: {result.error}", fg=typer.colors.RED, err=True)
                raise typer.Exit(code=1)

        src, dst = (result.value for result in checked)
        try:
            converted = convert(cache, from_code=src, to_code=dst, amount=parsed.value)
        except (CurrencyNotFound, ConversionError, DecimalException) as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

    typer.echo(format_conversion(parsed.value, src, converted, dst))


@app.command("init-db")
def init_db() -> None:
    """Create the currencies table if it does not exist."""
    engine = build_engine(settings.sqlalchemy_url())
    try:
        create_schema(engine)
    except SQLAlchemyError as exc:
        log_exception(logger, "bootstrap.schema.failure")
        typer.secho(f"Could not create schema: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        engine.dispose()
    typer.echo("Currency table ready.")


if __name__ == "__main__":
    app()
