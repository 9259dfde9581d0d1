from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol

from currency_converter.modules.currencies.errors import CurrencyNotFound
from currency_converter.modules.currencies.schemas import CurrencyRecord


class SupportsFetchAll(Protocol):
    def fetch_all(self) -> list[CurrencyRecord]: ...


class CurrencyCache:
    """Ordered in-memory snapshot of the currencies table."""

    def __init__(self, records: Iterable[CurrencyRecord] = ()):
        self._records: list[CurrencyRecord] = list(records)

    def reload(self, store: SupportsFetchAll) -> None:
        self._records = list(store.fetch_all())

    def codes(self) -> set[str]:
        return {record.code for record in self._records}

    def find(self, code: str) -> CurrencyRecord:
        wanted = code.strip().upper()
        for record in self._records:
            if record.code == wanted:
                return record
        raise CurrencyNotFound(wanted)

    def remove(self, record: CurrencyRecord) -> None:
        self._records = [r for r in self._records if r.id != record.id]

    def __iter__(self) -> Iterator[CurrencyRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
