from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from dexinfo.domain.entities.snapshot_context import SnapshotContext
from dexinfo.domain.entities.token_metric import TokenMetric
from dexinfo.domain.entities.token_snapshot import JoinedTokenSnapshots, TokenSnapshot
from dexinfo.domain.services.token_display import TokenDisplayOverrides


ZERO = Decimal("0")
HUNDRED = Decimal("100")

VolumeSource = Literal["current_window", "previous_window", "cumulative", "none"]


@dataclass(frozen=True)
class WindowVolume:
    value: Decimal
    change: Decimal
    source: VolumeSource


def percent_change(new_value: Decimal | None, old_value: Decimal | None) -> Decimal:
    if new_value is None or old_value is None:
        return ZERO
    if old_value == 0:
        return ZERO
    return (new_value - old_value) / old_value * HUNDRED


def _difference(newer: Decimal | None, older: Decimal | None) -> Decimal | None:
    if newer is None or older is None:
        return None
    return newer - older


def two_day_volume(
    current: Decimal | None,
    one_day: Decimal | None,
    two_day: Decimal | None,
) -> WindowVolume:
    """Derive the last 24h volume and its change from three cumulative totals.

    The primary candidate is ``current - one_day``; the previous window
    ``one_day - two_day`` is the baseline for the change. When the primary
    candidate is unavailable or negative (the latest snapshot lags behind the
    24h one) the previous window is reported instead, with no change, because
    there is no trustworthy window left to compare it against.
    """
    if current is None and one_day is None:
        return WindowVolume(value=ZERO, change=ZERO, source="none")
    if one_day is None or two_day is None:
        return WindowVolume(value=current if current is not None else ZERO, change=ZERO, source="cumulative")

    window = _difference(current, one_day)
    previous_window = _difference(one_day, two_day)
    if window is None or window < 0:
        value = previous_window if previous_window is not None and previous_window >= 0 else ZERO
        return WindowVolume(value=value, change=ZERO, source="previous_window")
    return WindowVolume(
        value=window,
        change=percent_change(window, previous_window),
        source="current_window",
    )


def usd_price(snapshot: TokenSnapshot | None, eth_price_usd: Decimal | None) -> Decimal:
    if snapshot is None or snapshot.derived_eth is None or eth_price_usd is None:
        return ZERO
    return snapshot.derived_eth * eth_price_usd


def _price_change(price: Decimal, previous_price: Decimal) -> Decimal:
    if not price or not previous_price:
        return ZERO
    return percent_change(price, previous_price)


def calculate_token_metric(
    joined: JoinedTokenSnapshots,
    *,
    context: SnapshotContext,
    chain_id: int,
    display: TokenDisplayOverrides,
) -> TokenMetric | None:
    current = joined.current
    if current is None:
        return None
    one_day = joined.one_day
    two_day = joined.two_day
    week = joined.week

    volume = two_day_volume(
        current.volume_usd,
        one_day.volume_usd if one_day is not None else None,
        two_day.volume_usd if two_day is not None else None,
    )

    current_volume = current.volume_usd if current.volume_usd is not None else ZERO
    volume_week = current_volume
    if week is not None:
        week_delta = _difference(current.volume_usd, week.volume_usd)
        volume_week = week_delta if week_delta is not None else ZERO

    tvl_usd = current.total_value_locked_usd if current.total_value_locked_usd is not None else ZERO
    tvl_usd_change = ZERO
    if one_day is not None:
        tvl_usd_change = percent_change(current.total_value_locked_usd, one_day.total_value_locked_usd)
    tvl_token = current.total_value_locked if current.total_value_locked is not None else ZERO

    prices = context.prices
    price_usd = usd_price(current, prices.current)
    price_usd_one_day = usd_price(one_day, prices.one_day)
    price_usd_week = usd_price(week, prices.week)

    tx_count = current.tx_count if current.tx_count is not None else 0
    if one_day is not None and current.tx_count is not None and one_day.tx_count is not None:
        tx_count = current.tx_count - one_day.tx_count

    return TokenMetric(
        address=joined.address,
        name=display.name(chain_id=chain_id, address=joined.address, fallback=current.name),
        symbol=display.symbol(chain_id=chain_id, address=joined.address, fallback=current.symbol),
        volume_usd=volume.value,
        volume_usd_change=volume.change,
        volume_usd_week=volume_week,
        tx_count=tx_count,
        tvl_usd=tvl_usd,
        tvl_usd_change=tvl_usd_change,
        tvl_token=tvl_token,
        price_usd=price_usd,
        price_usd_change=_price_change(price_usd, price_usd_one_day),
        price_usd_change_week=_price_change(price_usd, price_usd_week),
    )


def calculate_token_metrics(
    joined_rows: Iterable[JoinedTokenSnapshots],
    *,
    context: SnapshotContext,
    chain_id: int,
    display: TokenDisplayOverrides,
) -> dict[str, TokenMetric]:
    metrics: dict[str, TokenMetric] = {}
    for joined in joined_rows:
        metric = calculate_token_metric(joined, context=context, chain_id=chain_id, display=display)
        if metric is not None:
            metrics[joined.address] = metric
    return metrics
