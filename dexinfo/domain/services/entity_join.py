from __future__ import annotations

from collections.abc import Iterable

from dexinfo.domain.entities.token_snapshot import JoinedTokenSnapshots, TokenSnapshot
from dexinfo.domain.services.identity import normalize_address


def index_by_address(tokens: Iterable[TokenSnapshot] | None) -> dict[str, TokenSnapshot]:
    indexed: dict[str, TokenSnapshot] = {}
    if not tokens:
        return indexed
    for token in tokens:
        indexed.setdefault(normalize_address(token.address), token)
    return indexed


def join_token_snapshots(
    addresses: Iterable[str],
    *,
    current: Iterable[TokenSnapshot] | None,
    one_day: Iterable[TokenSnapshot] | None,
    two_day: Iterable[TokenSnapshot] | None,
    week: Iterable[TokenSnapshot] | None,
) -> list[JoinedTokenSnapshots]:
    parsed = index_by_address(current)
    parsed_one_day = index_by_address(one_day)
    parsed_two_day = index_by_address(two_day)
    parsed_week = index_by_address(week)

    joined: list[JoinedTokenSnapshots] = []
    for address in addresses:
        key = normalize_address(address)
        joined.append(
            JoinedTokenSnapshots(
                address=key,
                current=parsed.get(key),
                one_day=parsed_one_day.get(key),
                two_day=parsed_two_day.get(key),
                week=parsed_week.get(key),
            )
        )
    return joined
