from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TokenMetric:
    address: str
    name: str
    symbol: str
    volume_usd: Decimal
    volume_usd_change: Decimal
    volume_usd_week: Decimal
    tx_count: int
    tvl_usd: Decimal
    tvl_usd_change: Decimal
    tvl_token: Decimal
    price_usd: Decimal
    price_usd_change: Decimal
    price_usd_change_week: Decimal
