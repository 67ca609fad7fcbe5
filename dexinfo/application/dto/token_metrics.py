from __future__ import annotations

from dataclasses import dataclass

from dexinfo.domain.entities.snapshot_context import SnapshotContext
from dexinfo.domain.entities.token_metric import TokenMetric


@dataclass(frozen=True)
class AggregateTokenMetricsInput:
    chain_id: int
    token_ids: tuple[str, ...]


@dataclass(frozen=True)
class AggregateTopTokenMetricsInput:
    chain_id: int


@dataclass(frozen=True)
class AggregateTokenMetricsOutput:
    loading: bool
    error: bool
    data: dict[str, TokenMetric] | None
    context: SnapshotContext | None = None
