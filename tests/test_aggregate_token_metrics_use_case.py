from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import unittest

import pytest

from dexinfo.application.dto.token_metrics import AggregateTokenMetricsInput, AggregateTopTokenMetricsInput
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.application.use_cases.aggregate_token_metrics import AggregateTokenMetricsUseCase
from dexinfo.application.use_cases.aggregate_top_token_metrics import AggregateTopTokenMetricsUseCase
from dexinfo.domain.entities.snapshot_context import EthPrices, ResolvedBlock
from dexinfo.domain.entities.token_snapshot import TokenSnapshot, TokenSnapshotBatch
from dexinfo.domain.exceptions import SourceUnavailableError, TokenMetricsInputError


NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)
BLOCKS = {"one_day": 300, "two_day": 200, "week": 100}


def _token(address: str, *, volume_usd: str, tx_count: int, tvl_usd: str) -> TokenSnapshot:
    return TokenSnapshot(
        address=address,
        symbol="WETH",
        name="Wrapped Ether",
        derived_eth=Decimal("1"),
        volume_usd=Decimal(volume_usd),
        volume=None,
        tx_count=tx_count,
        total_value_locked=Decimal("10"),
        total_value_locked_usd=Decimal(tvl_usd),
    )


class FakeTokenSnapshotPort:
    def __init__(self, *, failing_block: int | None = None, top_ids: list[str] | None = None):
        self.failing_block = failing_block
        self.top_ids = top_ids or []
        self.calls: list[int | None] = []
        self._rows = {
            None: ("300", 50, "1200", "2000"),
            BLOCKS["one_day"]: ("100", 20, "1000", "1900"),
            BLOCKS["two_day"]: ("50", 10, "900", "1850"),
            BLOCKS["week"]: ("10", 1, "500", "1800"),
        }

    def fetch_token_snapshots(self, *, chain_id, token_ids, block_number):
        self.calls.append(block_number)
        if block_number is not None and block_number == self.failing_block:
            raise SourceUnavailableError("indexer error")
        volume_usd, tx_count, tvl_usd, eth_price = self._rows[block_number]
        tokens = [
            _token(token_id, volume_usd=volume_usd, tx_count=tx_count, tvl_usd=tvl_usd)
            for token_id in token_ids
        ]
        return TokenSnapshotBatch(block_number=block_number, tokens=tokens, eth_price_usd=Decimal(eth_price))

    def list_top_token_ids(self, *, chain_id, first):
        return self.top_ids[:first]


class FakeBlockResolverPort:
    def __init__(self, *, fail: bool = False, missing_week: bool = False):
        self.fail = fail
        self.missing_week = missing_week
        self.timestamps: list[int] = []

    def resolve_blocks(self, *, chain_id, timestamps):
        self.timestamps = list(timestamps)
        if self.fail:
            raise SourceUnavailableError("blocks subgraph down")
        return [
            ResolvedBlock(number=BLOCKS["one_day"]),
            ResolvedBlock(number=BLOCKS["two_day"]),
            None if self.missing_week else ResolvedBlock(number=BLOCKS["week"]),
        ]


class FakeEthPricePort:
    def __init__(self, prices: EthPrices | None = None, *, fail: bool = False):
        self.prices = prices
        self.fail = fail

    def get_eth_prices(self, *, chain_id, one_day_block, week_block):
        if self.fail:
            raise SourceUnavailableError("bundle unavailable")
        return self.prices

    def get_current_eth_price(self, *, chain_id):
        return self.prices.current if self.prices else None


def _prices() -> EthPrices:
    return EthPrices(current=Decimal("2000"), one_day=Decimal("1900"), week=Decimal("1800"))


def _use_case(
    *,
    snapshots: FakeTokenSnapshotPort | None = None,
    blocks: FakeBlockResolverPort | None = None,
    prices: FakeEthPricePort | None = None,
) -> AggregateTokenMetricsUseCase:
    return AggregateTokenMetricsUseCase(
        token_snapshot_port=snapshots or FakeTokenSnapshotPort(),
        block_resolver_port=blocks or FakeBlockResolverPort(),
        eth_price_port=prices or FakeEthPricePort(_prices()),
        fan_out=SourceFanOut(max_workers=4, timeout_seconds=5),
        clock=lambda: NOW,
    )


def _command(*ids: str) -> AggregateTokenMetricsInput:
    return AggregateTokenMetricsInput(chain_id=1, token_ids=ids or ("0xAAA",))


class AggregateTokenMetricsUseCaseTests(unittest.TestCase):
    def test_ready_aggregation_returns_metrics(self):
        snapshots = FakeTokenSnapshotPort()
        output = _use_case(snapshots=snapshots).execute(_command())

        self.assertFalse(output.loading)
        self.assertFalse(output.error)
        metric = output.data["0xaaa"]
        self.assertEqual(metric.volume_usd, Decimal("200"))
        self.assertEqual(metric.volume_usd_change, Decimal("300"))
        self.assertEqual(metric.tx_count, 30)
        self.assertEqual(metric.price_usd, Decimal("2000"))
        self.assertEqual(sorted(snapshots.calls, key=lambda v: v or 0), [None, 100, 200, 300])

    def test_context_carries_blocks_and_two_day_price(self):
        output = _use_case().execute(_command())

        self.assertEqual(output.context.blocks.week.number, BLOCKS["week"])
        self.assertEqual(output.context.prices.two_day, Decimal("1850"))

    def test_single_failed_snapshot_errors_whole_aggregation(self):
        output = _use_case(snapshots=FakeTokenSnapshotPort(failing_block=BLOCKS["two_day"])).execute(_command())

        self.assertTrue(output.error)
        self.assertIsNone(output.data)

    def test_missing_eth_price_is_loading_not_error(self):
        output = _use_case(prices=FakeEthPricePort(None)).execute(_command())

        self.assertTrue(output.loading)
        self.assertFalse(output.error)
        self.assertIsNone(output.data)

    def test_failed_eth_price_is_error_not_loading(self):
        output = _use_case(prices=FakeEthPricePort(fail=True)).execute(_command())

        self.assertTrue(output.error)
        self.assertFalse(output.loading)
        self.assertIsNone(output.data)

    def test_failed_blocks_are_an_error(self):
        output = _use_case(blocks=FakeBlockResolverPort(fail=True)).execute(_command())

        self.assertTrue(output.error)
        self.assertIsNone(output.data)

    def test_unresolved_block_keeps_loading_without_pinned_fetches(self):
        snapshots = FakeTokenSnapshotPort()
        output = _use_case(snapshots=snapshots, blocks=FakeBlockResolverPort(missing_week=True)).execute(_command())

        self.assertTrue(output.loading)
        self.assertFalse(output.error)
        self.assertEqual(snapshots.calls, [None])

    def test_repeated_calls_are_identical(self):
        use_case = _use_case()

        first = use_case.execute(_command("0xaaa", "0xbbb"))
        second = use_case.execute(_command("0xaaa", "0xbbb"))

        self.assertEqual(first.data, second.data)

    def test_resolves_blocks_for_minute_floored_deltas(self):
        blocks = FakeBlockResolverPort()
        _use_case(blocks=blocks).execute(_command())

        self.assertEqual(blocks.timestamps[0], int(NOW.timestamp()) - 86400)
        self.assertEqual(blocks.timestamps[2], int(NOW.timestamp()) - 7 * 86400)


def test_rejects_empty_ids():
    with pytest.raises(TokenMetricsInputError):
        _use_case().execute(AggregateTokenMetricsInput(chain_id=1, token_ids=(" ",)))


def test_rejects_non_hex_ids():
    with pytest.raises(TokenMetricsInputError):
        _use_case().execute(AggregateTokenMetricsInput(chain_id=1, token_ids=("weth",)))


def test_top_tokens_delegate_to_aggregation():
    snapshots = FakeTokenSnapshotPort(top_ids=["0xaaa", "0xbbb", "0xccc"])
    top = AggregateTopTokenMetricsUseCase(
        token_snapshot_port=snapshots,
        aggregate_token_metrics=_use_case(snapshots=snapshots),
        fan_out=SourceFanOut(max_workers=1, timeout_seconds=5),
        limit=2,
    )

    output = top.execute(AggregateTopTokenMetricsInput(chain_id=1))

    assert output.error is False
    assert list(output.data) == ["0xaaa", "0xbbb"]


def test_top_tokens_without_results_is_empty_ready():
    top = AggregateTopTokenMetricsUseCase(
        token_snapshot_port=FakeTokenSnapshotPort(top_ids=[]),
        aggregate_token_metrics=_use_case(),
        fan_out=SourceFanOut(max_workers=1, timeout_seconds=5),
    )

    output = top.execute(AggregateTopTokenMetricsInput(chain_id=1))

    assert output.loading is False
    assert output.data == {}


def test_top_tokens_limit_is_capped_at_max_token_ids():
    top_ids = [f"0x{i:040x}" for i in range(250)]
    snapshots = FakeTokenSnapshotPort(top_ids=top_ids)
    top = AggregateTopTokenMetricsUseCase(
        token_snapshot_port=snapshots,
        aggregate_token_metrics=_use_case(snapshots=snapshots),
        fan_out=SourceFanOut(max_workers=1, timeout_seconds=5),
        limit=500,
    )

    output = top.execute(AggregateTopTokenMetricsInput(chain_id=1))

    assert output.error is False
    assert len(output.data) == 200
