from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dexinfo.domain.entities.transaction import BurnEvent, EventPair, MintEvent, SwapEvent, UserEvents
from dexinfo.domain.services.identity import normalize_address
from dexinfo.infrastructure.mappers.numeric import decimal_or_none, int_or_none


def _map_pair(pool: Mapping[str, Any]) -> EventPair:
    token0 = pool["token0"]
    token1 = pool["token1"]
    return EventPair(
        token0_address=normalize_address(str(token0["id"])),
        token0_symbol=str(token0.get("symbol") or ""),
        token1_address=normalize_address(str(token1["id"])),
        token1_symbol=str(token1.get("symbol") or ""),
    )


def _optional_address(value: Any) -> str | None:
    return normalize_address(str(value)) if value else None


def map_row_to_mint_event(row: Mapping[str, Any]) -> MintEvent:
    return MintEvent(
        hash=str(row["transaction"]["id"]),
        timestamp=int_or_none(row.get("timestamp")) or 0,
        origin=normalize_address(str(row.get("origin") or "")),
        owner=_optional_address(row.get("owner")),
        sender=_optional_address(row.get("sender")),
        pair=_map_pair(row["pool"]),
        amount0=decimal_or_none(row.get("amount0")),
        amount1=decimal_or_none(row.get("amount1")),
        amount_usd=decimal_or_none(row.get("amountUSD")),
    )


def map_row_to_burn_event(row: Mapping[str, Any]) -> BurnEvent:
    return BurnEvent(
        hash=str(row["transaction"]["id"]),
        timestamp=int_or_none(row.get("timestamp")) or 0,
        origin=normalize_address(str(row.get("origin") or "")),
        owner=_optional_address(row.get("owner")),
        pair=_map_pair(row["pool"]),
        amount0=decimal_or_none(row.get("amount0")),
        amount1=decimal_or_none(row.get("amount1")),
        amount_usd=decimal_or_none(row.get("amountUSD")),
    )


def map_row_to_swap_event(row: Mapping[str, Any]) -> SwapEvent:
    return SwapEvent(
        hash=str(row["transaction"]["id"]),
        timestamp=int_or_none(row.get("timestamp")) or 0,
        origin=normalize_address(str(row.get("origin") or "")),
        pair=_map_pair(row["pool"]),
        amount0=decimal_or_none(row.get("amount0")),
        amount1=decimal_or_none(row.get("amount1")),
        amount_usd=decimal_or_none(row.get("amountUSD")),
    )


def map_payload_to_user_events(data: Mapping[str, Any]) -> UserEvents:
    return UserEvents(
        mints=[map_row_to_mint_event(row) for row in data.get("mints") or []],
        burns=[map_row_to_burn_event(row) for row in data.get("burns") or []],
        swaps=[map_row_to_swap_event(row) for row in data.get("swaps") or []],
    )
