from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class PositionTokenResponse(BaseModel):
    address: str
    symbol: str
    decimals: int
    derived_eth: Decimal | None = None


class PositionPoolResponse(BaseModel):
    address: str
    fee_tier: int | None = None
    tick: int | None = None
    liquidity: str | None = None
    reinvest_l: str | None = None
    sqrt_price: str | None = None


class PositionDataResponse(BaseModel):
    owner: str
    liquidity: str
    tick_lower: int | None = None
    tick_upper: int | None = None
    pool: PositionPoolResponse
    token0: PositionTokenResponse
    token1: PositionTokenResponse


class PositionResponse(BaseModel):
    id: str
    value_usd: Decimal
    token0_amount: Decimal
    token1_amount: Decimal
    data: PositionDataResponse


class PositionsResponse(BaseModel):
    loading: bool
    error: bool
    positions: list[PositionResponse] | None = None
