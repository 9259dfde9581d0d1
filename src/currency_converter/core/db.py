from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.engine.url import make_url


def build_engine(database_url: str | URL) -> Engine:
    url = make_url(database_url)
    connect_args: dict = {}
    if url.drivername.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)
