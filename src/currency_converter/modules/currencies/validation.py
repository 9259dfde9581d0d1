from __future__ import annotations

import math
import re
from collections.abc import Collection
from dataclasses import dataclass
from decimal import Decimal
from typing import Generic, TypeVar

T = TypeVar("T")

CODE_LENGTH = 3
# Amounts at or beyond 10**28 fall outside a 28-digit decimal.
MAX_AMOUNT_DIGITS = 28

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def valid(cls, value: T) -> ValidationResult[T]:
        return cls(value=value)

    @classmethod
    def invalid(cls, error: str) -> ValidationResult[T]:
        return cls(error=error)


def normalize_code(raw: str) -> str:
    return (raw or "").strip().upper()


def _numeric_text(raw: str) -> str | None:
    text = (raw or "").strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    return text


def validate_existing_code(raw: str, codes: Collection[str]) -> ValidationResult[str]:
    code = normalize_code(raw)
    if code not in codes:
        return ValidationResult.invalid(f"unknown currency code {code!r}")
    return ValidationResult.valid(code)


def validate_new_code(raw: str, taken: Collection[str]) -> ValidationResult[str]:
    code = normalize_code(raw)
    if len(code) != CODE_LENGTH:
        return ValidationResult.invalid("currency code must be exactly three characters")
    if code in taken:
        return ValidationResult.invalid(f"currency code {code!r} already exists")
    return ValidationResult.valid(code)


def validate_amount(raw: str) -> ValidationResult[Decimal]:
    text = _numeric_text(raw)
    if text is None:
        return ValidationResult.invalid("amount must be a number")
    amount = Decimal(text)
    if amount.adjusted() >= MAX_AMOUNT_DIGITS:
        return ValidationResult.invalid("amount is too large")
    return ValidationResult.valid(amount)


def validate_rate(raw: str) -> ValidationResult[float]:
    text = _numeric_text(raw)
    if text is None:
        return ValidationResult.invalid("exchange rate must be a number")
    rate = float(text)
    if not math.isfinite(rate):
        return ValidationResult.invalid("exchange rate must be a finite number")
    if rate <= 0:
        return ValidationResult.invalid("exchange rate must be greater than zero")
    return ValidationResult.valid(rate)
