from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CurrencyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    code: str
    rate: float
