from __future__ import annotations

from sqlalchemy.engine import Engine

import currency_converter.models  # noqa: F401
from currency_converter.core.config import Settings
from currency_converter.core.logging import get_logger, log_event
from currency_converter.core.models import Base

logger = get_logger(__name__)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
    log_event(logger, "bootstrap.schema.created", backend=engine.url.get_backend_name())


def bootstrap(engine: Engine, settings: Settings) -> None:
    if settings.create_schema or (
        settings.environment == "dev" and engine.url.get_backend_name() == "sqlite"
    ):
        create_schema(engine)
