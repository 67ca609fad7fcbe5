from __future__ import annotations

import math
from decimal import Decimal


LOG_BASE = math.log(1.0001)
Q96 = Decimal(2) ** 96


def tick_to_sqrt_price(tick: int | float) -> Decimal:
    return Decimal(str(math.exp(float(tick) * LOG_BASE / 2.0)))


def sqrt_price_x96_to_sqrt_price(sqrt_price_x96: int) -> Decimal:
    if sqrt_price_x96 <= 0:
        raise ValueError("Invalid sqrt_price_x96.")
    return Decimal(sqrt_price_x96) / Q96


def position_token_amounts(
    *,
    liquidity: int,
    sqrt_price_x96: int | None,
    tick_current: int | None,
    tick_lower: int | None,
    tick_upper: int | None,
    token0_decimals: int,
    token1_decimals: int,
) -> tuple[Decimal, Decimal]:
    """Token amounts held by a position, adjusted by each token's decimals.

    Below the range the position is entirely token0, above it entirely
    token1, and inside it splits at the current sqrt price.
    """
    if tick_current is None or sqrt_price_x96 is None:
        raise ValueError("Pool tick and sqrt price are required.")
    if tick_lower is None or tick_upper is None:
        raise ValueError("Position tick range is required.")
    if tick_lower >= tick_upper:
        raise ValueError("tick_lower must be below tick_upper.")
    if liquidity < 0:
        raise ValueError("liquidity must be non-negative.")

    sqrt_current = sqrt_price_x96_to_sqrt_price(sqrt_price_x96)
    sqrt_lower = tick_to_sqrt_price(tick_lower)
    sqrt_upper = tick_to_sqrt_price(tick_upper)
    amount_liquidity = Decimal(liquidity)

    if tick_current < tick_lower:
        amount0_raw = amount_liquidity * (sqrt_upper - sqrt_lower) / (sqrt_lower * sqrt_upper)
        amount1_raw = Decimal("0")
    elif tick_current >= tick_upper:
        amount0_raw = Decimal("0")
        amount1_raw = amount_liquidity * (sqrt_upper - sqrt_lower)
    else:
        amount0_raw = amount_liquidity * (sqrt_upper - sqrt_current) / (sqrt_current * sqrt_upper)
        amount1_raw = amount_liquidity * (sqrt_current - sqrt_lower)

    amount0 = amount0_raw / (Decimal(10) ** Decimal(token0_decimals))
    amount1 = amount1_raw / (Decimal(10) ** Decimal(token1_decimals))
    return amount0, amount1
