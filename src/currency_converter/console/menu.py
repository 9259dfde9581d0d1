from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Collection, Iterable
from contextlib import closing
from dataclasses import dataclass, field
from decimal import Decimal, DecimalException

from currency_converter.console.terminal import MenuIO
from currency_converter.core.logging import get_logger, log_event
from currency_converter.modules.currencies.cache import CurrencyCache
from currency_converter.modules.currencies.errors import (
    ConversionError,
    CurrencyNotFound,
    StoreOperationError,
)
from currency_converter.modules.currencies.schemas import CurrencyRecord
from currency_converter.modules.currencies.service import convert, format_conversion
from currency_converter.modules.currencies.store import CurrencyStore
from currency_converter.modules.currencies.validation import (
    ValidationResult,
    validate_amount,
    validate_existing_code,
    validate_new_code,
    validate_rate,
)

logger = get_logger(__name__)

SEPARATOR = "--------------------------------"
TABLE_HEADER = "CurrencyID | CurrencyCode | ExchangeRate"
TABLE_SEPARATOR = "----------------------------------------"

MENU_TEXT = "\n".join(
    [
        "",
        SEPARATOR,
        "[x] - Exchange currency",
        "[c] - Create new currency entry",
        "[r] - Read currency database",
        "[u] - Update currency entry",
        "[d] - Delete currency entry",
        SEPARATOR,
        "",
        "Choose a menu option to continue, or press [q] to quit.",
    ]
)

QUIT_KEY = "q"
CONFIRM_KEY = "y"


class MenuState(str, enum.Enum):
    RUNNING = "RUNNING"
    TERMINATED = "TERMINATED"


@dataclass
class MenuContext:
    store: CurrencyStore
    cache: CurrencyCache
    io: MenuIO
    state: MenuState = field(default=MenuState.RUNNING)


def ask_until(
    io: MenuIO,
    prompt: str,
    retry_prompt: str,
    validate: Callable[[str], ValidationResult],
):
    result = validate(io.prompt(prompt))
    while not result.ok:
        result = validate(io.prompt(retry_prompt))
    return result.value


def ask_existing_code(ctx: MenuContext) -> str:
    codes = ctx.cache.codes()
    return ask_until(
        ctx.io,
        "Enter currency code (ex: USD): ",
        "Please enter a valid currency code (ex: USD): ",
        lambda raw: validate_existing_code(raw, codes),
    )


def ask_new_code(ctx: MenuContext, taken: Collection[str]) -> str:
    return ask_until(
        ctx.io,
        "Enter a unique currency code (ex: USD): ",
        "Please enter a valid, unique, three-letter currency code (ex: USD): ",
        lambda raw: validate_new_code(raw, taken),
    )


def ask_rate(ctx: MenuContext, prompt: str) -> float:
    return ask_until(
        ctx.io,
        prompt,
        "Please enter a valid number for the exchange rate (ex: 1.0): ",
        validate_rate,
    )


def format_row(record: CurrencyRecord) -> str:
    return f"{record.id}\t   | {record.code}\t  | {record.rate}"


def render_table(io: MenuIO, records: Iterable[CurrencyRecord]) -> None:
    io.echo()
    io.echo(TABLE_HEADER)
    io.echo(TABLE_SEPARATOR)
    for record in records:
        io.echo(format_row(record))
    io.echo(TABLE_SEPARATOR)


def handle_exchange(ctx: MenuContext) -> None:
    ctx.io.echo()
    ctx.io.echo("Which currency are you converting from?")
    from_code = ask_existing_code(ctx)
    ctx.io.echo("Which currency are you converting to?")
    to_code = ask_existing_code(ctx)

    amount: Decimal = ask_until(
        ctx.io,
        "Enter amount of currency to convert (ex: 1.0): ",
        "Enter a valid number for the amount of currency to convert (ex: 1.0): ",
        validate_amount,
    )

    converted = convert(ctx.cache, from_code=from_code, to_code=to_code, amount=amount)

    ctx.io.echo()
    ctx.io.echo(SEPARATOR)
    ctx.io.echo(format_conversion(amount, from_code, converted, to_code))
    ctx.io.echo(SEPARATOR)


def handle_create(ctx: MenuContext) -> None:
    ctx.io.echo()
    code = ask_new_code(ctx, ctx.cache.codes())
    rate = ask_rate(ctx, "Enter exchange rate (ex: 1.0): ")

    ctx.store.insert(code, rate)
    ctx.cache.reload(ctx.store)

    render_table(ctx.io, [ctx.cache.find(code)])


def handle_read(ctx: MenuContext) -> None:
    render_table(ctx.io, ctx.cache)


def handle_update(ctx: MenuContext) -> None:
    ctx.io.echo("Which currency would you like to update?")
    record = ctx.cache.find(ask_existing_code(ctx))
    render_table(ctx.io, [record])

    # The record may keep its own code.
    taken = ctx.cache.codes() - {record.code}
    code = ask_new_code(ctx, taken)
    rate = ask_rate(ctx, "Enter updated exchange rate (ex: 1.0): ")

    ctx.store.update(record.id, code, rate)
    ctx.cache.reload(ctx.store)

    render_table(ctx.io, [ctx.cache.find(code)])


def handle_delete(ctx: MenuContext) -> None:
    ctx.io.echo("Which currency would you like to delete?")
    record = ctx.cache.find(ask_existing_code(ctx))
    render_table(ctx.io, [record])

    ctx.io.echo()
    ctx.io.echo(f"Are you sure you want to delete the entry for {record.code}?")
    ctx.io.echo("Press [y] or [n]: ")
    if ctx.io.read_key() != CONFIRM_KEY:
        return

    ctx.store.delete(record.id)
    ctx.cache.remove(record)


HANDLERS: dict[str, Callable[[MenuContext], None]] = {
    "x": handle_exchange,
    "c": handle_create,
    "r": handle_read,
    "u": handle_update,
    "d": handle_delete,
}


def dispatch(ctx: MenuContext, key: str) -> None:
    if key == QUIT_KEY:
        ctx.state = MenuState.TERMINATED
        return
    handler = HANDLERS.get(key)
    if handler is None:
        return
    log_event(logger, "menu.command", command=handler.__name__)
    try:
        handler(ctx)
    except (StoreOperationError, CurrencyNotFound, ConversionError, DecimalException) as exc:
        log_event(
            logger, "menu.error", level=logging.WARNING, command=handler.__name__, error=str(exc)
        )
        ctx.io.echo()
        ctx.io.echo(f"Error: {exc}")


def run_menu(ctx: MenuContext) -> None:
    while ctx.state is MenuState.RUNNING:
        ctx.io.echo(MENU_TEXT)
        try:
            key = ctx.io.read_key()
        except EOFError:
            ctx.state = MenuState.TERMINATED
            break
        dispatch(ctx, key)


def run_interactive(store: CurrencyStore, io: MenuIO) -> None:
    """Load the cache and run the menu, closing the store however the loop ends."""
    with closing(store):
        cache = CurrencyCache()
        cache.reload(store)
        io.echo("Currency Converter")
        run_menu(MenuContext(store=store, cache=cache, io=io))
