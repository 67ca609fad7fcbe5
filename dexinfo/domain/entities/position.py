from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PositionToken:
    address: str
    symbol: str
    decimals: int
    derived_eth: Decimal | None


@dataclass(frozen=True)
class PositionPool:
    address: str
    fee_tier: int | None
    tick: int | None
    liquidity: int | None
    reinvest_l: int | None
    sqrt_price: int | None


@dataclass(frozen=True)
class PositionRecord:
    position_id: str
    owner: str
    liquidity: int
    pool: PositionPool
    tick_lower: int | None
    tick_upper: int | None
    token0: PositionToken
    token1: PositionToken


@dataclass(frozen=True)
class FormattedPosition:
    position_id: str
    value_usd: Decimal
    token0_amount: Decimal
    token1_amount: Decimal
    data: PositionRecord
