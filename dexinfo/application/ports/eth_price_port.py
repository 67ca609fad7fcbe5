from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from dexinfo.domain.entities.snapshot_context import EthPrices


class EthPricePort(Protocol):
    def get_eth_prices(
        self,
        *,
        chain_id: int,
        one_day_block: int,
        week_block: int,
    ) -> EthPrices | None:
        ...

    def get_current_eth_price(self, *, chain_id: int) -> Decimal | None:
        ...
