from __future__ import annotations

import os

import pytest

# Set env before any currency_converter imports (settings are created at import time).
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./.currency_converter_test.db")


class ScriptedIO:
    """Menu I/O that replays prepared answers and records everything echoed."""

    def __init__(self, lines=(), keys=()):
        self.lines = list(lines)
        self.keys = list(keys)
        self.output: list[str] = []
        self.prompts: list[str] = []

    def echo(self, text: str = "") -> None:
        self.output.extend(text.split("\n"))

    def prompt(self, text: str) -> str:
        self.prompts.append(text)
        if not self.lines:
            raise AssertionError(f"unexpected prompt: {text!r}")
        return self.lines.pop(0)

    def read_key(self) -> str:
        if not self.keys:
            raise EOFError("no more keys")
        return self.keys.pop(0)

    @property
    def text(self) -> str:
        return "\n".join(self.output)


@pytest.fixture(autouse=True)
def _reset_db() -> None:
    import currency_converter.models  # noqa: F401
    from currency_converter.core.config import settings
    from currency_converter.core.db import build_engine
    from currency_converter.core.models import Base

    engine = build_engine(settings.sqlalchemy_url())
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()

    yield


@pytest.fixture()
def store():
    from currency_converter.core.config import settings
    from currency_converter.modules.currencies.store import CurrencyStore

    store = CurrencyStore.connect(settings)
    yield store
    store.close()


@pytest.fixture()
def seeded_store(store):
    store.insert("USD", 1.0)
    store.insert("EUR", 0.9)
    store.insert("JPY", 150.0)
    return store


@pytest.fixture()
def scripted_io():
    return ScriptedIO
