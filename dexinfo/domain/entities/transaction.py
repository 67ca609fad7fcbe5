from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal


TransactionType = Literal["mint", "burn", "swap"]


@dataclass(frozen=True)
class EventPair:
    token0_address: str
    token0_symbol: str
    token1_address: str
    token1_symbol: str


@dataclass(frozen=True)
class MintEvent:
    hash: str
    timestamp: int
    origin: str
    owner: str | None
    sender: str | None
    pair: EventPair
    amount0: Decimal | None
    amount1: Decimal | None
    amount_usd: Decimal | None


@dataclass(frozen=True)
class BurnEvent:
    hash: str
    timestamp: int
    origin: str
    owner: str | None
    pair: EventPair
    amount0: Decimal | None
    amount1: Decimal | None
    amount_usd: Decimal | None


@dataclass(frozen=True)
class SwapEvent:
    hash: str
    timestamp: int
    origin: str
    pair: EventPair
    amount0: Decimal | None
    amount1: Decimal | None
    amount_usd: Decimal | None


@dataclass(frozen=True)
class UserEvents:
    mints: list[MintEvent] = field(default_factory=list)
    burns: list[BurnEvent] = field(default_factory=list)
    swaps: list[SwapEvent] = field(default_factory=list)


@dataclass(frozen=True)
class NormalizedTransaction:
    type: TransactionType
    hash: str
    timestamp: int
    sender: str
    token0_symbol: str
    token1_symbol: str
    token0_address: str
    token1_address: str
    amount_usd: Decimal | None
    amount_token0: Decimal | None
    amount_token1: Decimal | None
    chain_id: int
