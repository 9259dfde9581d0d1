from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from currency_converter.core.config import Settings
from currency_converter.core.db import build_engine
from currency_converter.core.logging import get_logger, log_event, log_exception, monotonic_ms
from currency_converter.modules.currencies.errors import (
    StoreConnectionError,
    StoreOperationError,
)
from currency_converter.modules.currencies.models import Currency
from currency_converter.modules.currencies.schemas import CurrencyRecord

logger = get_logger(__name__)

T = TypeVar("T")


class CurrencyStore:
    """Persistence boundary for the ``currencies`` table.

    One connection is opened by :meth:`connect` and held until :meth:`close`.
    Every statement is an SQLAlchemy construct with bound parameters.
    """

    def __init__(self, engine: Engine, connection: Connection):
        self._engine = engine
        self._connection = connection
        self._session = Session(bind=connection, autoflush=False, expire_on_commit=False)
        self._closed = False

    @classmethod
    def connect(cls, settings: Settings) -> CurrencyStore:
        start = time.monotonic()
        engine: Engine | None = None
        try:
            engine = build_engine(settings.sqlalchemy_url())
            connection = engine.connect()
        except (SQLAlchemyError, ImportError) as exc:
            # Bad URLs and missing dialects or drivers fail before any connection exists.
            log_exception(
                logger,
                "store.connect.failure",
                backend=engine.url.get_backend_name() if engine is not None else None,
                host=engine.url.host if engine is not None else None,
            )
            if engine is not None:
                engine.dispose()
            raise StoreConnectionError(f"Could not connect to the currency database: {exc}") from exc
        log_event(
            logger,
            "store.connect.success",
            backend=engine.url.get_backend_name(),
            host=engine.url.host,
            database=engine.url.database,
            duration_ms=monotonic_ms(start),
        )
        return cls(engine, connection)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> CurrencyStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_all(self) -> list[CurrencyRecord]:
        def _fetch(session: Session) -> list[CurrencyRecord]:
            rows = session.scalars(select(Currency).order_by(Currency.id))
            return [CurrencyRecord.model_validate(row, from_attributes=True) for row in rows]

        return self._run("store.fetch_all", _fetch, commit=False)

    def insert(self, code: str, rate: float) -> CurrencyRecord:
        def _insert(session: Session) -> CurrencyRecord:
            row = Currency(code=code, rate=rate)
            session.add(row)
            session.flush()
            return CurrencyRecord.model_validate(row, from_attributes=True)

        record = self._run("store.insert", _insert, code=code, rate=rate)
        log_event(logger, "store.insert", currency_id=record.id, code=code, rate=rate)
        return record

    def update(self, currency_id: int, code: str, rate: float) -> None:
        def _update(session: Session) -> None:
            result = session.execute(
                update(Currency).where(Currency.id == currency_id).values(code=code, rate=rate)
            )
            if result.rowcount == 0:
                raise StoreOperationError(f"No currency with id {currency_id}")

        self._run("store.update", _update, currency_id=currency_id, code=code, rate=rate)
        log_event(logger, "store.update", currency_id=currency_id, code=code, rate=rate)

    def delete(self, currency_id: int) -> None:
        def _delete(session: Session) -> None:
            result = session.execute(delete(Currency).where(Currency.id == currency_id))
            if result.rowcount == 0:
                raise StoreOperationError(f"No currency with id {currency_id}")

        self._run("store.delete", _delete, currency_id=currency_id)
        log_event(logger, "store.delete", currency_id=currency_id)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._session.close()
            self._connection.close()
        finally:
            self._engine.dispose()
        log_event(logger, "store.close")

    def _run(self, event: str, op: Callable[[Session], T], *, commit: bool = True, **fields) -> T:
        if self._closed:
            raise StoreOperationError("Currency store is closed")
        try:
            result = op(self._session)
            if commit:
                self._session.commit()
            else:
                self._session.rollback()
            return result
        except StoreOperationError:
            self._session.rollback()
            log_event(logger, f"{event}.failure", level=logging.WARNING, **fields)
            raise
        except SQLAlchemyError as exc:
            self._session.rollback()
            log_exception(logger, f"{event}.failure", **fields)
            raise StoreOperationError(str(exc)) from exc
