from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from decimal import Decimal

from dexinfo.domain.entities.position import FormattedPosition, PositionRecord, PositionToken
from dexinfo.domain.services.identity import normalize_address
from dexinfo.domain.services.univ3_math import position_token_amounts


ZERO = Decimal("0")
AmountsCalculator = Callable[..., tuple[Decimal, Decimal]]
logger = logging.getLogger(__name__)


def token_price_usd(token: PositionToken, eth_price_usd: Decimal | None) -> Decimal:
    if token.derived_eth is None or eth_price_usd is None:
        return ZERO
    return token.derived_eth * eth_price_usd


def valuate_position(
    record: PositionRecord,
    *,
    eth_price_usd: Decimal | None,
    amounts_calculator: AmountsCalculator = position_token_amounts,
) -> FormattedPosition:
    try:
        token0_amount, token1_amount = amounts_calculator(
            liquidity=record.liquidity,
            sqrt_price_x96=record.pool.sqrt_price,
            tick_current=record.pool.tick,
            tick_lower=record.tick_lower,
            tick_upper=record.tick_upper,
            token0_decimals=record.token0.decimals,
            token1_decimals=record.token1.decimals,
        )
    except (ValueError, ArithmeticError) as exc:
        logger.warning(
            "position_valuation: amounts_unavailable position=%s pool=%s error=%s",
            record.position_id,
            record.pool.address,
            exc,
        )
        return FormattedPosition(
            position_id=record.position_id,
            value_usd=ZERO,
            token0_amount=ZERO,
            token1_amount=ZERO,
            data=record,
        )

    if eth_price_usd is None or record.token0.derived_eth is None or record.token1.derived_eth is None:
        logger.warning(
            "position_valuation: unpriced_token position=%s token0=%s token1=%s",
            record.position_id,
            record.token0.address,
            record.token1.address,
        )
        value_usd = ZERO
    else:
        price0 = token_price_usd(record.token0, eth_price_usd)
        price1 = token_price_usd(record.token1, eth_price_usd)
        value_usd = token0_amount * price0 + token1_amount * price1
    return FormattedPosition(
        position_id=record.position_id,
        value_usd=value_usd,
        token0_amount=token0_amount,
        token1_amount=token1_amount,
        data=record,
    )


def valuate_positions(
    records: Iterable[PositionRecord],
    *,
    eth_price_usd: Decimal | None,
    pool_ids: Iterable[str] | None = None,
    amounts_calculator: AmountsCalculator = position_token_amounts,
) -> list[FormattedPosition]:
    """Value each position in USD, keeping fetch order.

    With ``pool_ids`` only positions of those pools are kept; without it every
    record is valued (the single owner listing).
    """
    allowed = {normalize_address(pool_id) for pool_id in pool_ids} if pool_ids is not None else None
    formatted: list[FormattedPosition] = []
    for record in records:
        if allowed is not None and normalize_address(record.pool.address) not in allowed:
            continue
        formatted.append(
            valuate_position(
                record,
                eth_price_usd=eth_price_usd,
                amounts_calculator=amounts_calculator,
            )
        )
    return formatted
