from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from dexinfo.application.dto.token_metrics import (
    AggregateTokenMetricsInput,
    AggregateTokenMetricsOutput,
)
from dexinfo.application.ports.block_resolver_port import BlockResolverPort
from dexinfo.application.ports.eth_price_port import EthPricePort
from dexinfo.application.ports.token_snapshot_port import TokenSnapshotPort
from dexinfo.application.services.source_fan_out import SourceFanOut, SourceOutcome
from dexinfo.domain.entities.snapshot_context import (
    DeltaBlocks,
    EthPrices,
    ReferencePrices,
    ResolvedBlock,
    SnapshotContext,
)
from dexinfo.domain.entities.token_snapshot import TokenSnapshotBatch
from dexinfo.domain.exceptions import TokenMetricsInputError
from dexinfo.domain.services.aggregation_status import SourceState, resolve_aggregation_status
from dexinfo.domain.services.delta_timestamps import delta_timestamps
from dexinfo.domain.services.entity_join import join_token_snapshots
from dexinfo.domain.services.identity import is_hex_address, normalize_addresses
from dexinfo.domain.services.token_deltas import calculate_token_metrics
from dexinfo.domain.services.token_display import TokenDisplayOverrides


MAX_TOKEN_IDS = 200
logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AggregateTokenMetricsUseCase:
    def __init__(
        self,
        *,
        token_snapshot_port: TokenSnapshotPort,
        block_resolver_port: BlockResolverPort,
        eth_price_port: EthPricePort,
        fan_out: SourceFanOut,
        display_overrides: TokenDisplayOverrides | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._token_snapshot_port = token_snapshot_port
        self._block_resolver_port = block_resolver_port
        self._eth_price_port = eth_price_port
        self._fan_out = fan_out
        self._display = display_overrides or TokenDisplayOverrides()
        self._clock = clock

    def execute(self, command: AggregateTokenMetricsInput) -> AggregateTokenMetricsOutput:
        if command.chain_id <= 0:
            raise TokenMetricsInputError("chain_id must be a positive integer.")
        token_ids = normalize_addresses(command.token_ids)
        if not token_ids:
            raise TokenMetricsInputError("At least one token id is required.")
        if len(token_ids) > MAX_TOKEN_IDS:
            raise TokenMetricsInputError(f"At most {MAX_TOKEN_IDS} token ids are supported.")
        invalid = [token_id for token_id in token_ids if not is_hex_address(token_id)]
        if invalid:
            raise TokenMetricsInputError(f"Token ids must start with 0x: {', '.join(invalid)}")

        chain_id = command.chain_id
        timestamps = delta_timestamps(self._clock())
        logger.info(
            "aggregate_token_metrics: start chain_id=%s tokens=%s t24=%s t48=%s tweek=%s",
            chain_id,
            len(token_ids),
            timestamps.one_day,
            timestamps.two_day,
            timestamps.week,
        )

        first_stage = self._fan_out.run(
            {
                "blocks": lambda: self._block_resolver_port.resolve_blocks(
                    chain_id=chain_id,
                    timestamps=timestamps.as_list(),
                ),
                "current": lambda: self._fetch(chain_id, token_ids, None),
            }
        )
        blocks_outcome = first_stage["blocks"]
        blocks = self._delta_blocks(blocks_outcome)

        if blocks.resolved:
            one_day_number = blocks.one_day.number
            two_day_number = blocks.two_day.number
            week_number = blocks.week.number
            second_stage = self._fan_out.run(
                {
                    "one_day": lambda: self._fetch(chain_id, token_ids, one_day_number),
                    "two_day": lambda: self._fetch(chain_id, token_ids, two_day_number),
                    "week": lambda: self._fetch(chain_id, token_ids, week_number),
                    "eth_prices": lambda: self._eth_price_port.get_eth_prices(
                        chain_id=chain_id,
                        one_day_block=one_day_number,
                        week_block=week_number,
                    ),
                }
            )
        else:
            second_stage = {
                name: SourceOutcome.pending(name)
                for name in ("one_day", "two_day", "week", "eth_prices")
            }

        prices_outcome = second_stage["eth_prices"]
        eth_prices: EthPrices | None = prices_outcome.value
        price_state = SourceState(
            name="eth_prices",
            loading=(eth_prices is None or eth_prices.current is None) and not prices_outcome.error,
            error=prices_outcome.error,
        )
        states = [
            SourceState(
                name="blocks",
                loading=not blocks_outcome.settled or not blocks.resolved,
                error=blocks_outcome.error,
            ),
            first_stage["current"].state,
            second_stage["one_day"].state,
            second_stage["two_day"].state,
            second_stage["week"].state,
        ]
        # The price lookup needs the resolved blocks; until it is issued it is
        # just another pending source and must not hide a block failure.
        if blocks.resolved:
            status = resolve_aggregation_status(states, reference_price=price_state)
        else:
            status = resolve_aggregation_status([*states, price_state])

        if status.errored or not status.ready:
            logger.warning(
                "aggregate_token_metrics: not_ready chain_id=%s loading=%s error=%s pending=%s failed=%s",
                chain_id,
                status.loading,
                status.errored,
                ",".join(status.pending_sources),
                ",".join(status.failed_sources),
            )
            return AggregateTokenMetricsOutput(
                loading=status.loading,
                error=status.errored,
                data=None,
            )

        current: TokenSnapshotBatch = first_stage["current"].value
        one_day: TokenSnapshotBatch = second_stage["one_day"].value
        two_day: TokenSnapshotBatch = second_stage["two_day"].value
        week: TokenSnapshotBatch = second_stage["week"].value
        context = SnapshotContext(
            blocks=blocks,
            prices=ReferencePrices(
                current=eth_prices.current,
                one_day=eth_prices.one_day,
                two_day=two_day.eth_price_usd,
                week=eth_prices.week,
            ),
        )

        joined = join_token_snapshots(
            token_ids,
            current=current.tokens,
            one_day=one_day.tokens,
            two_day=two_day.tokens,
            week=week.tokens,
        )
        data = calculate_token_metrics(
            joined,
            context=context,
            chain_id=chain_id,
            display=self._display,
        )
        logger.info(
            "aggregate_token_metrics: done chain_id=%s requested=%s formatted=%s",
            chain_id,
            len(token_ids),
            len(data),
        )
        return AggregateTokenMetricsOutput(loading=False, error=False, data=data, context=context)

    def _fetch(self, chain_id: int, token_ids: list[str], block_number: int | None) -> TokenSnapshotBatch:
        return self._token_snapshot_port.fetch_token_snapshots(
            chain_id=chain_id,
            token_ids=token_ids,
            block_number=block_number,
        )

    @staticmethod
    def _delta_blocks(outcome: SourceOutcome) -> DeltaBlocks:
        rows: list[ResolvedBlock | None] = list(outcome.value or []) if outcome.settled else []
        rows.extend([None] * (3 - len(rows)))
        return DeltaBlocks(one_day=rows[0], two_day=rows[1], week=rows[2])
