from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dexinfo.domain.entities.token_snapshot import TokenSnapshot, TokenSnapshotBatch
from dexinfo.domain.services.identity import normalize_address
from dexinfo.infrastructure.mappers.numeric import decimal_or_none, int_or_none


def map_row_to_token_snapshot(row: Mapping[str, Any]) -> TokenSnapshot:
    return TokenSnapshot(
        address=normalize_address(str(row["id"])),
        symbol=str(row.get("symbol") or ""),
        name=str(row.get("name") or ""),
        derived_eth=decimal_or_none(row.get("derivedETH")),
        volume_usd=decimal_or_none(row.get("volumeUSD")),
        volume=decimal_or_none(row.get("volume")),
        tx_count=int_or_none(row.get("txCount")),
        total_value_locked=decimal_or_none(row.get("totalValueLocked")),
        total_value_locked_usd=decimal_or_none(row.get("totalValueLockedUSD")),
    )


def map_payload_to_token_snapshot_batch(
    data: Mapping[str, Any],
    *,
    block_number: int | None,
) -> TokenSnapshotBatch:
    rows = data.get("tokens") or []
    bundles = data.get("bundles") or []
    eth_price = decimal_or_none(bundles[0].get("ethPriceUSD")) if bundles else None
    return TokenSnapshotBatch(
        block_number=block_number,
        tokens=[map_row_to_token_snapshot(row) for row in rows if row.get("id")],
        eth_price_usd=eth_price,
    )
