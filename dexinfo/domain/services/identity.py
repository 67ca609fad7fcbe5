from __future__ import annotations

from collections.abc import Iterable


def normalize_address(value: str) -> str:
    return value.strip().lower()


def normalize_addresses(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        key = normalize_address(value)
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(key)
    return result


def is_hex_address(value: str) -> bool:
    return normalize_address(value).startswith("0x")
