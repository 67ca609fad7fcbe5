from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel


class TransactionResponse(BaseModel):
    type: Literal["mint", "burn", "swap"]
    hash: str
    timestamp: int
    sender: str
    token0_symbol: str
    token1_symbol: str
    token0_address: str
    token1_address: str
    amount_usd: Decimal | None = None
    amount_token0: Decimal | None = None
    amount_token1: Decimal | None = None
    chain_id: int


class TransactionsResponse(BaseModel):
    loading: bool
    error: bool
    data: list[TransactionResponse]
