from __future__ import annotations

from functools import lru_cache

from dexinfo.application.services.source_fan_out import SourceFanOut
from dexinfo.application.use_cases.aggregate_token_metrics import AggregateTokenMetricsUseCase
from dexinfo.application.use_cases.aggregate_top_token_metrics import AggregateTopTokenMetricsUseCase
from dexinfo.application.use_cases.list_user_transactions import ListUserTransactionsUseCase
from dexinfo.application.use_cases.valuate_owner_positions import ValuateOwnerPositionsUseCase
from dexinfo.application.use_cases.valuate_positions import ValuatePositionsUseCase
from dexinfo.domain.services.token_display import TokenDisplayOverrides
from dexinfo.infrastructure.clients.subgraph_adapters import (
    SubgraphBlockResolverAdapter,
    SubgraphEthPriceAdapter,
    SubgraphPositionAdapter,
    SubgraphTokenSnapshotAdapter,
    SubgraphUserEventsAdapter,
)
from dexinfo.infrastructure.clients.univ3_subgraph_client import (
    Univ3SubgraphClient,
    Univ3SubgraphClientSettings,
)
from dexinfo.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_univ3_subgraph_client() -> Univ3SubgraphClient:
    settings = get_settings()
    return Univ3SubgraphClient(
        Univ3SubgraphClientSettings(
            graph_gateway_base=settings.graph_gateway_base,
            graph_api_key=settings.graph_api_key,
            graph_subgraph_ids=settings.graph_subgraph_ids,
            graph_blocks_subgraph_ids=settings.graph_blocks_subgraph_ids,
            timeout_seconds=settings.graph_request_timeout_seconds,
            max_retries=settings.graph_max_retries,
            min_interval_ms=settings.graph_min_interval_ms,
            include_reinvest_l=settings.graph_pool_reinvest_l,
        )
    )


@lru_cache(maxsize=1)
def _get_fan_out() -> SourceFanOut:
    settings = get_settings()
    return SourceFanOut(
        max_workers=settings.snapshot_fan_out_workers,
        timeout_seconds=settings.snapshot_fan_out_timeout_seconds,
    )


@lru_cache(maxsize=1)
def _get_display_overrides() -> TokenDisplayOverrides:
    settings = get_settings()
    return TokenDisplayOverrides(
        symbols=settings.token_symbol_overrides,
        names=settings.token_name_overrides,
    )


def get_aggregate_token_metrics_use_case() -> AggregateTokenMetricsUseCase:
    client = _get_univ3_subgraph_client()
    return AggregateTokenMetricsUseCase(
        token_snapshot_port=SubgraphTokenSnapshotAdapter(client),
        block_resolver_port=SubgraphBlockResolverAdapter(client),
        eth_price_port=SubgraphEthPriceAdapter(client),
        fan_out=_get_fan_out(),
        display_overrides=_get_display_overrides(),
    )


def get_aggregate_top_token_metrics_use_case() -> AggregateTopTokenMetricsUseCase:
    settings = get_settings()
    return AggregateTopTokenMetricsUseCase(
        token_snapshot_port=SubgraphTokenSnapshotAdapter(_get_univ3_subgraph_client()),
        aggregate_token_metrics=get_aggregate_token_metrics_use_case(),
        fan_out=_get_fan_out(),
        limit=settings.top_tokens_limit,
    )


def get_valuate_positions_use_case() -> ValuatePositionsUseCase:
    client = _get_univ3_subgraph_client()
    return ValuatePositionsUseCase(
        position_port=SubgraphPositionAdapter(client),
        eth_price_port=SubgraphEthPriceAdapter(client),
        fan_out=_get_fan_out(),
    )


def get_valuate_owner_positions_use_case() -> ValuateOwnerPositionsUseCase:
    client = _get_univ3_subgraph_client()
    return ValuateOwnerPositionsUseCase(
        position_port=SubgraphPositionAdapter(client),
        eth_price_port=SubgraphEthPriceAdapter(client),
        fan_out=_get_fan_out(),
    )


def get_list_user_transactions_use_case() -> ListUserTransactionsUseCase:
    return ListUserTransactionsUseCase(
        user_events_port=SubgraphUserEventsAdapter(_get_univ3_subgraph_client()),
        fan_out=_get_fan_out(),
        display_overrides=_get_display_overrides(),
    )
