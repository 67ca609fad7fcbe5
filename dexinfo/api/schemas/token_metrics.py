from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class TokenMetricResponse(BaseModel):
    address: str
    name: str
    symbol: str
    volume_usd: Decimal = Field(..., description="USD volume over the last 24h.")
    volume_usd_change: Decimal = Field(..., description="24h volume change versus the previous 24h, in percent.")
    volume_usd_week: Decimal
    tx_count: int
    tvl_usd: Decimal
    tvl_usd_change: Decimal
    tvl_token: Decimal
    price_usd: Decimal
    price_usd_change: Decimal
    price_usd_change_week: Decimal


class TokenMetricsBlocksResponse(BaseModel):
    one_day: int
    two_day: int
    week: int


class TokenMetricsPricesResponse(BaseModel):
    current: Decimal | None = None
    one_day: Decimal | None = None
    two_day: Decimal | None = None
    week: Decimal | None = None


class TokenMetricsMetaResponse(BaseModel):
    blocks: TokenMetricsBlocksResponse
    eth_prices: TokenMetricsPricesResponse


class TokenMetricsResponse(BaseModel):
    loading: bool
    error: bool
    data: dict[str, TokenMetricResponse] | None = None
    meta: TokenMetricsMetaResponse | None = None
