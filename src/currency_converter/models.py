"""
Alembic model import hook.

Importing this module ensures all SQLAlchemy models are registered on Base.metadata.
"""

from __future__ import annotations

from currency_converter.modules.currencies.models import Currency  # noqa: F401
