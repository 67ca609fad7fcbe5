from __future__ import annotations


CHAIN_ID_TO_KEY = {
    1: "ethereum",
    42161: "arbitrum",
    8453: "base",
    137: "polygon",
    56: "bsc",
}


def chain_key(chain_id: int) -> str | None:
    return CHAIN_ID_TO_KEY.get(chain_id)
