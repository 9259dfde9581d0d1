from __future__ import annotations


class StoreError(RuntimeError):
    pass


class StoreConnectionError(StoreError):
    pass


class StoreOperationError(StoreError):
    pass


class CurrencyNotFound(LookupError):
    def __init__(self, code: str):
        super().__init__(f"Currency {code!r} not found")
        self.code = code


class ConversionError(ValueError):
    pass
