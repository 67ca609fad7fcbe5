from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


def decimal_or_none(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def int_or_none(value: Any) -> int | None:
    parsed = decimal_or_none(value)
    if parsed is None or parsed != parsed.to_integral_value():
        return None
    return int(parsed)
