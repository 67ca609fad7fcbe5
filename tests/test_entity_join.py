from __future__ import annotations

from decimal import Decimal

from dexinfo.domain.entities.token_snapshot import TokenSnapshot
from dexinfo.domain.services.entity_join import index_by_address, join_token_snapshots


def _snapshot(address: str, volume_usd: str = "1") -> TokenSnapshot:
    return TokenSnapshot(
        address=address,
        symbol="T",
        name="Token",
        derived_eth=None,
        volume_usd=Decimal(volume_usd),
        volume=None,
        tx_count=None,
        total_value_locked=None,
        total_value_locked_usd=None,
    )


def test_index_keeps_first_occurrence_and_lowercases():
    indexed = index_by_address([_snapshot("0xAbC", "1"), _snapshot("0xabc", "2")])

    assert list(indexed) == ["0xabc"]
    assert indexed["0xabc"].volume_usd == Decimal("1")


def test_index_of_missing_list_is_empty():
    assert index_by_address(None) == {}


def test_join_marks_absent_windows():
    joined = join_token_snapshots(
        ["0xAAA", "0xbbb"],
        current=[_snapshot("0xaaa"), _snapshot("0xbbb")],
        one_day=[_snapshot("0xaaa")],
        two_day=None,
        week=[],
    )

    assert [row.address for row in joined] == ["0xaaa", "0xbbb"]
    assert joined[0].one_day is not None
    assert joined[1].one_day is None
    assert joined[0].two_day is None
    assert joined[0].week is None
