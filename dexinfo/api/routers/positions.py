from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dexinfo.api.deps import get_valuate_owner_positions_use_case, get_valuate_positions_use_case
from dexinfo.api.schemas.positions import (
    PositionDataResponse,
    PositionPoolResponse,
    PositionResponse,
    PositionsResponse,
    PositionTokenResponse,
)
from dexinfo.application.dto.positions import (
    ValuateOwnerPositionsInput,
    ValuatePositionsInput,
    ValuatePositionsOutput,
)
from dexinfo.application.use_cases.valuate_owner_positions import ValuateOwnerPositionsUseCase
from dexinfo.application.use_cases.valuate_positions import ValuatePositionsUseCase
from dexinfo.domain.entities.position import FormattedPosition, PositionToken
from dexinfo.domain.exceptions import PositionsInputError

router = APIRouter()
logger = logging.getLogger(__name__)


def _int_to_str_or_none(value: int | None) -> str | None:
    return str(value) if value is not None else None


def _token_response(token: PositionToken) -> PositionTokenResponse:
    return PositionTokenResponse(
        address=token.address,
        symbol=token.symbol,
        decimals=token.decimals,
        derived_eth=token.derived_eth,
    )


def _position_response(position: FormattedPosition) -> PositionResponse:
    record = position.data
    return PositionResponse(
        id=position.position_id,
        value_usd=position.value_usd,
        token0_amount=position.token0_amount,
        token1_amount=position.token1_amount,
        data=PositionDataResponse(
            owner=record.owner,
            liquidity=str(record.liquidity),
            tick_lower=record.tick_lower,
            tick_upper=record.tick_upper,
            pool=PositionPoolResponse(
                address=record.pool.address,
                fee_tier=record.pool.fee_tier,
                tick=record.pool.tick,
                liquidity=_int_to_str_or_none(record.pool.liquidity),
                reinvest_l=_int_to_str_or_none(record.pool.reinvest_l),
                sqrt_price=_int_to_str_or_none(record.pool.sqrt_price),
            ),
            token0=_token_response(record.token0),
            token1=_token_response(record.token1),
        ),
    )


def _to_response(result: ValuatePositionsOutput) -> PositionsResponse:
    positions = None
    if result.positions is not None:
        positions = [_position_response(position) for position in result.positions]
    return PositionsResponse(loading=result.loading, error=result.error, positions=positions)


@router.get("/v1/positions", response_model=PositionsResponse)
def get_positions(
    pool_ids: str = Query(..., alias="poolIds", description="Comma separated pool addresses."),
    chain_id: int = Query(1, alias="chainId"),
    use_case: ValuatePositionsUseCase = Depends(get_valuate_positions_use_case),
):
    ids = tuple(part.strip() for part in pool_ids.split(",") if part.strip())
    try:
        result = use_case.execute(ValuatePositionsInput(chain_id=chain_id, pool_ids=ids))
    except PositionsInputError as exc:
        logger.warning(
            "positions_router: invalid_input chain_id=%s pool_ids=%s detail=%s",
            chain_id,
            pool_ids,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _to_response(result)


@router.get("/v1/accounts/{address}/positions", response_model=PositionsResponse)
def get_owner_positions(
    address: str,
    chain_id: int = Query(1, alias="chainId"),
    use_case: ValuateOwnerPositionsUseCase = Depends(get_valuate_owner_positions_use_case),
):
    try:
        result = use_case.execute(ValuateOwnerPositionsInput(chain_id=chain_id, owner=address))
    except PositionsInputError as exc:
        logger.warning(
            "positions_router: invalid_input chain_id=%s owner=%s detail=%s",
            chain_id,
            address,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _to_response(result)
