from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TokenSnapshot:
    address: str
    symbol: str
    name: str
    derived_eth: Decimal | None
    volume_usd: Decimal | None
    volume: Decimal | None
    tx_count: int | None
    total_value_locked: Decimal | None
    total_value_locked_usd: Decimal | None


@dataclass(frozen=True)
class TokenSnapshotBatch:
    block_number: int | None
    tokens: list[TokenSnapshot]
    eth_price_usd: Decimal | None


@dataclass(frozen=True)
class JoinedTokenSnapshots:
    address: str
    current: TokenSnapshot | None
    one_day: TokenSnapshot | None
    two_day: TokenSnapshot | None
    week: TokenSnapshot | None
