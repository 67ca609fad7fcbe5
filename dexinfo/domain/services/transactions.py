from __future__ import annotations

from dexinfo.domain.entities.transaction import (
    BurnEvent,
    EventPair,
    MintEvent,
    NormalizedTransaction,
    SwapEvent,
    TransactionType,
    UserEvents,
)
from dexinfo.domain.services.token_display import TokenDisplayOverrides


def _normalize(
    event: MintEvent | BurnEvent | SwapEvent,
    *,
    kind: TransactionType,
    chain_id: int,
    display: TokenDisplayOverrides,
) -> NormalizedTransaction:
    pair: EventPair = event.pair
    return NormalizedTransaction(
        type=kind,
        hash=event.hash,
        timestamp=event.timestamp,
        sender=event.origin,
        token0_symbol=display.symbol(
            chain_id=chain_id,
            address=pair.token0_address,
            fallback=pair.token0_symbol,
        ),
        token1_symbol=display.symbol(
            chain_id=chain_id,
            address=pair.token1_address,
            fallback=pair.token1_symbol,
        ),
        token0_address=pair.token0_address,
        token1_address=pair.token1_address,
        amount_usd=event.amount_usd,
        amount_token0=event.amount0,
        amount_token1=event.amount1,
        chain_id=chain_id,
    )


def normalize_user_events(
    events: UserEvents,
    *,
    chain_id: int,
    display: TokenDisplayOverrides,
) -> list[NormalizedTransaction]:
    """Mints, then burns, then swaps, each in fetch order. No re-sorting."""
    mints = [_normalize(row, kind="mint", chain_id=chain_id, display=display) for row in events.mints]
    burns = [_normalize(row, kind="burn", chain_id=chain_id, display=display) for row in events.burns]
    swaps = [_normalize(row, kind="swap", chain_id=chain_id, display=display) for row in events.swaps]
    return [*mints, *burns, *swaps]
