from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dexinfo.api.deps import (
    get_aggregate_token_metrics_use_case,
    get_aggregate_top_token_metrics_use_case,
)
from dexinfo.api.schemas.token_metrics import (
    TokenMetricResponse,
    TokenMetricsBlocksResponse,
    TokenMetricsMetaResponse,
    TokenMetricsPricesResponse,
    TokenMetricsResponse,
)
from dexinfo.application.dto.token_metrics import (
    AggregateTokenMetricsInput,
    AggregateTokenMetricsOutput,
    AggregateTopTokenMetricsInput,
)
from dexinfo.application.use_cases.aggregate_token_metrics import AggregateTokenMetricsUseCase
from dexinfo.application.use_cases.aggregate_top_token_metrics import AggregateTopTokenMetricsUseCase
from dexinfo.domain.exceptions import TokenMetricsInputError

router = APIRouter()
logger = logging.getLogger(__name__)


def _split_ids(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _to_response(result: AggregateTokenMetricsOutput) -> TokenMetricsResponse:
    meta = None
    context = result.context
    if context is not None and context.blocks.resolved:
        meta = TokenMetricsMetaResponse(
            blocks=TokenMetricsBlocksResponse(
                one_day=context.blocks.one_day.number,
                two_day=context.blocks.two_day.number,
                week=context.blocks.week.number,
            ),
            eth_prices=TokenMetricsPricesResponse(
                current=context.prices.current,
                one_day=context.prices.one_day,
                two_day=context.prices.two_day,
                week=context.prices.week,
            ),
        )

    data = None
    if result.data is not None:
        data = {
            address: TokenMetricResponse(
                address=metric.address,
                name=metric.name,
                symbol=metric.symbol,
                volume_usd=metric.volume_usd,
                volume_usd_change=metric.volume_usd_change,
                volume_usd_week=metric.volume_usd_week,
                tx_count=metric.tx_count,
                tvl_usd=metric.tvl_usd,
                tvl_usd_change=metric.tvl_usd_change,
                tvl_token=metric.tvl_token,
                price_usd=metric.price_usd,
                price_usd_change=metric.price_usd_change,
                price_usd_change_week=metric.price_usd_change_week,
            )
            for address, metric in result.data.items()
        }
    return TokenMetricsResponse(loading=result.loading, error=result.error, data=data, meta=meta)


@router.get("/v1/tokens/metrics", response_model=TokenMetricsResponse)
def get_token_metrics(
    ids: str = Query(..., description="Comma separated token addresses."),
    chain_id: int = Query(1, alias="chainId"),
    use_case: AggregateTokenMetricsUseCase = Depends(get_aggregate_token_metrics_use_case),
):
    try:
        result = use_case.execute(
            AggregateTokenMetricsInput(chain_id=chain_id, token_ids=_split_ids(ids))
        )
    except TokenMetricsInputError as exc:
        logger.warning(
            "token_metrics_router: invalid_input chain_id=%s ids=%s detail=%s",
            chain_id,
            ids,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _to_response(result)


@router.get("/v1/tokens/top/metrics", response_model=TokenMetricsResponse)
def get_top_token_metrics(
    chain_id: int = Query(1, alias="chainId"),
    use_case: AggregateTopTokenMetricsUseCase = Depends(get_aggregate_top_token_metrics_use_case),
):
    try:
        result = use_case.execute(AggregateTopTokenMetricsInput(chain_id=chain_id))
    except TokenMetricsInputError as exc:
        logger.warning("token_metrics_router: invalid_input chain_id=%s detail=%s", chain_id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _to_response(result)
