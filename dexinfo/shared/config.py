from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


def _bool(name: str, default: bool = False) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    graph_api_key: str
    graph_gateway_base: str
    graph_subgraph_ids: dict
    graph_blocks_subgraph_ids: dict
    graph_request_timeout_seconds: float
    graph_max_retries: int
    graph_min_interval_ms: int
    graph_pool_reinvest_l: bool
    snapshot_fan_out_workers: int
    snapshot_fan_out_timeout_seconds: float
    token_symbol_overrides: dict
    token_name_overrides: dict
    top_tokens_limit: int
    log_level: str


def get_settings() -> Settings:
    subgraphs = {
        "ethereum": _env("GRAPH_SUBGRAPH_ID_ETHEREUM", ""),
        "arbitrum": _env("GRAPH_SUBGRAPH_ID_ARBITRUM", ""),
        "base": _env("GRAPH_SUBGRAPH_ID_BASE", ""),
        "polygon": _env("GRAPH_SUBGRAPH_ID_POLYGON", ""),
        "bsc": _env("GRAPH_SUBGRAPH_ID_BSC", ""),
    }
    block_subgraphs = {
        "ethereum": _env("GRAPH_BLOCKS_SUBGRAPH_ID_ETHEREUM", ""),
        "arbitrum": _env("GRAPH_BLOCKS_SUBGRAPH_ID_ARBITRUM", ""),
        "base": _env("GRAPH_BLOCKS_SUBGRAPH_ID_BASE", ""),
        "polygon": _env("GRAPH_BLOCKS_SUBGRAPH_ID_POLYGON", ""),
        "bsc": _env("GRAPH_BLOCKS_SUBGRAPH_ID_BSC", ""),
    }
    return Settings(
        graph_api_key=_env("GRAPH_API_KEY", ""),
        graph_gateway_base=_env("GRAPH_GATEWAY_BASE", "https://gateway.thegraph.com/api"),
        graph_subgraph_ids=subgraphs,
        graph_blocks_subgraph_ids=block_subgraphs,
        graph_request_timeout_seconds=float(_env("GRAPH_REQUEST_TIMEOUT_SECONDS", "10")),
        graph_max_retries=int(_env("GRAPH_MAX_RETRIES", "3")),
        graph_min_interval_ms=int(_env("GRAPH_MIN_INTERVAL_MS", "0")),
        graph_pool_reinvest_l=_bool("GRAPH_POOL_REINVEST_L", False),
        snapshot_fan_out_workers=int(_env("SNAPSHOT_FAN_OUT_WORKERS", "6")),
        snapshot_fan_out_timeout_seconds=float(_env("SNAPSHOT_FAN_OUT_TIMEOUT_SECONDS", "30")),
        token_symbol_overrides=_json("TOKEN_SYMBOL_OVERRIDES"),
        token_name_overrides=_json("TOKEN_NAME_OVERRIDES"),
        top_tokens_limit=int(_env("TOP_TOKENS_LIMIT", "50")),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
