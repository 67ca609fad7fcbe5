from __future__ import annotations


TOKEN_FIELDS = """
        id
        symbol
        name
        derivedETH
        volumeUSD
        volume
        txCount
        totalValueLocked
        totalValueLockedUSD
"""

POSITION_TOKEN_FIELDS = """
        id
        symbol
        decimals
        derivedETH
"""

USER_EVENT_POOL_FIELDS = """
      timestamp
      transaction {
        id
      }
      pool {
        token0 {
          id
          symbol
        }
        token1 {
          id
          symbol
        }
      }
"""

TOP_TOKENS_QUERY = """
query TopTokens($first: Int!) {
  tokens(first: $first, orderBy: totalValueLockedUSD, orderDirection: desc, subgraphError: allow) {
    id
  }
}
"""

CURRENT_ETH_PRICE_QUERY = """
query CurrentEthPrice {
  bundle(id: "1") {
    ethPriceUSD
  }
}
"""

ETH_PRICES_QUERY = """
query EthPrices($oneDayBlock: Int!, $weekBlock: Int!) {
  current: bundle(id: "1") {
    ethPriceUSD
  }
  oneDay: bundle(id: "1", block: { number: $oneDayBlock }) {
    ethPriceUSD
  }
  oneWeek: bundle(id: "1", block: { number: $weekBlock }) {
    ethPriceUSD
  }
}
"""

USER_TRANSACTIONS_QUERY = (
    """
query UserTransactions($address: Bytes!) {
  mints(first: 500, orderBy: timestamp, orderDirection: desc, where: { origin: $address }, subgraphError: allow) {
"""
    + USER_EVENT_POOL_FIELDS
    + """
      owner
      sender
      origin
      amount0
      amount1
      amountUSD
  }
  swaps(first: 500, orderBy: timestamp, orderDirection: desc, where: { origin: $address }, subgraphError: allow) {
"""
    + USER_EVENT_POOL_FIELDS
    + """
      origin
      amount0
      amount1
      amountUSD
  }
  burns(first: 500, orderBy: timestamp, orderDirection: desc, where: { origin: $address }, subgraphError: allow) {
"""
    + USER_EVENT_POOL_FIELDS
    + """
      owner
      origin
      amount0
      amount1
      amountUSD
  }
}
"""
)

BLOCK_WINDOW_SECONDS = 600


def tokens_bulk_query(*, pinned: bool) -> str:
    """Token fields plus the ETH/USD bundle, optionally pinned to ``$block``."""
    if pinned:
        header = "query TokensBulk($ids: [ID!]!, $block: Int!) {"
        block_arg = ", block: { number: $block }"
    else:
        header = "query TokensBulk($ids: [ID!]!) {"
        block_arg = ""
    return (
        f"{header}\n"
        f"  tokens(first: 200, where: {{ id_in: $ids }}{block_arg}, "
        "orderBy: totalValueLockedUSD, orderDirection: desc) {"
        f"{TOKEN_FIELDS}"
        "  }\n"
        f"  bundles(first: 1{block_arg}) {{\n"
        "    ethPriceUSD\n"
        "  }\n"
        "}\n"
    )


def blocks_query(timestamps: list[int]) -> str:
    fragments = []
    for timestamp in timestamps:
        ts = int(timestamp)
        fragments.append(
            f"  t{ts}: blocks(first: 1, orderBy: timestamp, orderDirection: asc, "
            f"where: {{ timestamp_gt: {ts}, timestamp_lt: {ts + BLOCK_WINDOW_SECONDS} }}) {{\n"
            "    number\n"
            "    timestamp\n"
            "  }\n"
        )
    return "query BlocksByTimestamps {\n" + "".join(fragments) + "}\n"


def _position_fields(*, include_reinvest_l: bool) -> str:
    reinvest_l = "\n        reinvestL" if include_reinvest_l else ""
    return (
        """
      id
      owner
      liquidity
      pool {
        id
        feeTier
        tick
        liquidity"""
        + reinvest_l
        + """
        sqrtPrice
      }
      tickLower {
        tickIdx
      }
      tickUpper {
        tickIdx
      }
      token0 {"""
        + POSITION_TOKEN_FIELDS
        + """      }
      token1 {"""
        + POSITION_TOKEN_FIELDS
        + """      }
"""
    )


def positions_by_pools_query(*, include_reinvest_l: bool) -> str:
    return (
        "query PositionsByPools($poolIds: [String!]!) {\n"
        "  positions(where: { pool_in: $poolIds, liquidity_gt: 0 }, first: 100) {"
        + _position_fields(include_reinvest_l=include_reinvest_l)
        + "  }\n}\n"
    )


def positions_by_owner_query(*, include_reinvest_l: bool) -> str:
    return (
        "query PositionsByOwner($owner: Bytes!) {\n"
        "  positions(where: { owner: $owner, liquidity_gt: 0 }, first: 100) {"
        + _position_fields(include_reinvest_l=include_reinvest_l)
        + "  }\n}\n"
    )
