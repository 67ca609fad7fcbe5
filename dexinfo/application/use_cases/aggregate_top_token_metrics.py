from __future__ import annotations

import logging

from dexinfo.application.dto.token_metrics import (
    AggregateTokenMetricsInput,
    AggregateTokenMetricsOutput,
    AggregateTopTokenMetricsInput,
)
from dexinfo.application.ports.token_snapshot_port import TokenSnapshotPort
from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.application.use_cases.aggregate_token_metrics import MAX_TOKEN_IDS, AggregateTokenMetricsUseCase
from dexinfo.domain.exceptions import TokenMetricsInputError


logger = logging.getLogger(__name__)


class AggregateTopTokenMetricsUseCase:
    def __init__(
        self,
        *,
        token_snapshot_port: TokenSnapshotPort,
        aggregate_token_metrics: AggregateTokenMetricsUseCase,
        fan_out: SourceFanOut,
        limit: int = 50,
    ):
        self._token_snapshot_port = token_snapshot_port
        self._aggregate_token_metrics = aggregate_token_metrics
        self._fan_out = fan_out
        self._limit = min(max(1, limit), MAX_TOKEN_IDS)

    def execute(self, command: AggregateTopTokenMetricsInput) -> AggregateTokenMetricsOutput:
        if command.chain_id <= 0:
            raise TokenMetricsInputError("chain_id must be a positive integer.")

        outcome = self._fan_out.run(
            {
                "top_tokens": lambda: self._token_snapshot_port.list_top_token_ids(
                    chain_id=command.chain_id,
                    first=self._limit,
                )
            }
        )["top_tokens"]
        if outcome.error or not outcome.settled:
            logger.warning(
                "aggregate_top_token_metrics: top_tokens_unavailable chain_id=%s loading=%s error=%s",
                command.chain_id,
                not outcome.settled,
                outcome.error,
            )
            return AggregateTokenMetricsOutput(loading=not outcome.settled, error=outcome.error, data=None)

        token_ids = tuple(outcome.value or ())
        if not token_ids:
            return AggregateTokenMetricsOutput(loading=False, error=False, data={})

        return self._aggregate_token_metrics.execute(
            AggregateTokenMetricsInput(chain_id=command.chain_id, token_ids=token_ids)
        )
