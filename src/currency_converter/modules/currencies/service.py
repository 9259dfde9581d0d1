from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, DecimalException, localcontext

from currency_converter.modules.currencies.cache import CurrencyCache
from currency_converter.modules.currencies.errors import ConversionError

DISPLAY_PLACES = 4
DISPLAY_QUANTUM = Decimal("0.0001")


def convert(cache: CurrencyCache, *, from_code: str, to_code: str, amount: Decimal) -> Decimal:
    """Convert ``amount`` of ``from_code`` into ``to_code`` using cached rates.

    Rates are relative to one implicit common unit, so the result is
    ``amount * rate(to) / rate(from)``. No rounding is applied here.
    """
    exchange_from = cache.find(from_code)
    exchange_to = cache.find(to_code)

    rate_from = Decimal(str(exchange_from.rate))
    rate_to = Decimal(str(exchange_to.rate))
    if rate_from == 0:
        raise ConversionError(f"{exchange_from.code} has a zero exchange rate")

    try:
        return (rate_to * Decimal(amount)) / rate_from
    except DecimalException as exc:
        raise ConversionError(
            f"{amount} {exchange_from.code} cannot be expressed in {exchange_to.code}"
        ) from exc


def round_for_display(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the decimal places
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + DISPLAY_PLACES)
        return value.quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_EVEN)


def format_conversion(amount: Decimal, from_code: str, converted: Decimal, to_code: str) -> str:
    return f"{amount} {from_code} equals {round_for_display(converted)} {to_code}."
