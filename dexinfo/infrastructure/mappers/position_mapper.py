from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from dexinfo.domain.entities.position import PositionPool, PositionRecord, PositionToken
from dexinfo.domain.services.identity import normalize_address
from dexinfo.infrastructure.mappers.numeric import decimal_or_none, int_or_none


def _map_token(row: Mapping[str, Any]) -> PositionToken:
    return PositionToken(
        address=normalize_address(str(row.get("id") or "")),
        symbol=str(row.get("symbol") or ""),
        decimals=int_or_none(row.get("decimals")) or 0,
        derived_eth=decimal_or_none(row.get("derivedETH")),
    )


def _map_pool(row: Mapping[str, Any]) -> PositionPool:
    return PositionPool(
        address=normalize_address(str(row.get("id") or "")),
        fee_tier=int_or_none(row.get("feeTier")),
        tick=int_or_none(row.get("tick")),
        liquidity=int_or_none(row.get("liquidity")),
        reinvest_l=int_or_none(row.get("reinvestL")),
        sqrt_price=int_or_none(row.get("sqrtPrice")),
    )


def map_row_to_position_record(row: Mapping[str, Any]) -> PositionRecord:
    """Map one subgraph position row.

    Missing or unparseable nested values become ``None``/empty so the record
    is still returned; valuation turns it into a zero-value position.
    """
    return PositionRecord(
        position_id=str(row["id"]),
        owner=normalize_address(str(row.get("owner") or "")),
        liquidity=int_or_none(row.get("liquidity")) or 0,
        pool=_map_pool(row.get("pool") or {}),
        tick_lower=int_or_none((row.get("tickLower") or {}).get("tickIdx")),
        tick_upper=int_or_none((row.get("tickUpper") or {}).get("tickIdx")),
        token0=_map_token(row.get("token0") or {}),
        token1=_map_token(row.get("token1") or {}),
    )


def map_rows_to_position_records(rows: Iterable[Mapping[str, Any]]) -> list[PositionRecord]:
    return [map_row_to_position_record(row) for row in rows if row and row.get("id")]
