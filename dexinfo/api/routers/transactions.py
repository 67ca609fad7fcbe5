from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dexinfo.api.deps import get_list_user_transactions_use_case
from dexinfo.api.schemas.transactions import TransactionResponse, TransactionsResponse
from dexinfo.application.dto.transactions import ListUserTransactionsInput
from dexinfo.application.use_cases.list_user_transactions import ListUserTransactionsUseCase
from dexinfo.domain.exceptions import TransactionsInputError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/v1/accounts/{address}/transactions", response_model=TransactionsResponse)
def list_user_transactions(
    address: str,
    chain_id: int = Query(1, alias="chainId"),
    use_case: ListUserTransactionsUseCase = Depends(get_list_user_transactions_use_case),
):
    try:
        result = use_case.execute(ListUserTransactionsInput(chain_id=chain_id, address=address))
    except TransactionsInputError as exc:
        logger.warning(
            "transactions_router: invalid_input chain_id=%s address=%s detail=%s",
            chain_id,
            address,
            exc,
        )
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return TransactionsResponse(
        loading=result.loading,
        error=result.error,
        data=[
            TransactionResponse(
                type=row.type,
                hash=row.hash,
                timestamp=row.timestamp,
                sender=row.sender,
                token0_symbol=row.token0_symbol,
                token1_symbol=row.token1_symbol,
                token0_address=row.token0_address,
                token1_address=row.token1_address,
                amount_usd=row.amount_usd,
                amount_token0=row.amount_token0,
                amount_token1=row.amount_token1,
                chain_id=row.chain_id,
            )
            for row in result.data
        ],
    )
