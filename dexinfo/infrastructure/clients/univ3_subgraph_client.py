from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
from threading import Lock
import time

import httpx

from dexinfo.domain.entities.position import PositionRecord
from dexinfo.domain.entities.snapshot_context import EthPrices, ResolvedBlock
from dexinfo.domain.entities.token_snapshot import TokenSnapshotBatch
from dexinfo.domain.entities.transaction import UserEvents
from dexinfo.domain.services.chains import chain_key
from dexinfo.domain.services.identity import normalize_address, normalize_addresses
from dexinfo.infrastructure.clients.univ3_queries import (
    CURRENT_ETH_PRICE_QUERY,
    ETH_PRICES_QUERY,
    TOP_TOKENS_QUERY,
    USER_TRANSACTIONS_QUERY,
    blocks_query,
    positions_by_owner_query,
    positions_by_pools_query,
    tokens_bulk_query,
)
from dexinfo.infrastructure.mappers.numeric import decimal_or_none, int_or_none
from dexinfo.infrastructure.mappers.pool_event_mapper import map_payload_to_user_events
from dexinfo.infrastructure.mappers.position_mapper import map_rows_to_position_records
from dexinfo.infrastructure.mappers.token_snapshot_mapper import map_payload_to_token_snapshot_batch


logger = logging.getLogger(__name__)


class SubgraphError(RuntimeError):
    pass


class SubgraphRequestError(SubgraphError):
    pass


class SubgraphBlockNotSupportedError(SubgraphError):
    pass


class SubgraphResolutionError(SubgraphError):
    pass


@dataclass(frozen=True)
class Univ3SubgraphClientSettings:
    graph_gateway_base: str
    graph_api_key: str
    graph_subgraph_ids: dict
    graph_blocks_subgraph_ids: dict
    timeout_seconds: float
    max_retries: int
    min_interval_ms: int
    include_reinvest_l: bool = False


class Univ3SubgraphClient:
    def __init__(self, settings: Univ3SubgraphClientSettings):
        self._settings = settings
        self._lock = Lock()
        self._last_request_at = 0.0

    def fetch_token_snapshots(
        self,
        *,
        chain_id: int,
        token_ids: list[str],
        block_number: int | None,
    ) -> TokenSnapshotBatch:
        ids = normalize_addresses(token_ids)
        if not ids:
            return TokenSnapshotBatch(block_number=block_number, tokens=[], eth_price_usd=None)

        variables: dict = {"ids": ids}
        if block_number is not None:
            variables["block"] = int(block_number)
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=tokens_bulk_query(pinned=block_number is not None),
            variables=variables,
        )
        batch = map_payload_to_token_snapshot_batch(payload.get("data") or {}, block_number=block_number)
        logger.info(
            "univ3_subgraph_client: fetched_token_snapshots requested=%s fetched=%s chain_id=%s block=%s",
            len(ids),
            len(batch.tokens),
            chain_id,
            block_number,
        )
        return batch

    def fetch_top_token_ids(self, *, chain_id: int, first: int) -> list[str]:
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=TOP_TOKENS_QUERY,
            variables={"first": int(first)},
        )
        rows = (payload.get("data") or {}).get("tokens") or []
        token_ids = normalize_addresses(str(row["id"]) for row in rows if row.get("id"))
        logger.info(
            "univ3_subgraph_client: fetched_top_tokens requested=%s fetched=%s chain_id=%s",
            first,
            len(token_ids),
            chain_id,
        )
        return token_ids

    def fetch_blocks_for_timestamps(
        self,
        *,
        chain_id: int,
        timestamps: list[int],
    ) -> list[ResolvedBlock | None]:
        if not timestamps:
            return []

        blocks_url = self._resolve_blocks_subgraph_url(chain_id)
        payload = self._post_graphql(url=blocks_url, query=blocks_query(timestamps), variables={})
        data = payload.get("data") or {}

        resolved: list[ResolvedBlock | None] = []
        for timestamp in timestamps:
            rows = data.get(f"t{int(timestamp)}") or []
            number = int_or_none(rows[0].get("number")) if rows else None
            if number is None:
                resolved.append(None)
                continue
            resolved.append(
                ResolvedBlock(number=number, timestamp=int_or_none(rows[0].get("timestamp")))
            )

        logger.info(
            "univ3_subgraph_client: fetched_blocks requested=%s fetched=%s chain_id=%s",
            len(timestamps),
            sum(1 for row in resolved if row is not None),
            chain_id,
        )
        return resolved

    def fetch_eth_prices(
        self,
        *,
        chain_id: int,
        one_day_block: int,
        week_block: int,
    ) -> EthPrices | None:
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=ETH_PRICES_QUERY,
            variables={"oneDayBlock": int(one_day_block), "weekBlock": int(week_block)},
        )
        data = payload.get("data") or {}
        current = decimal_or_none((data.get("current") or {}).get("ethPriceUSD"))
        one_day = decimal_or_none((data.get("oneDay") or {}).get("ethPriceUSD"))
        week = decimal_or_none((data.get("oneWeek") or {}).get("ethPriceUSD"))
        if current is None or one_day is None or week is None:
            logger.info(
                "univ3_subgraph_client: eth_prices_incomplete chain_id=%s current=%s one_day=%s week=%s",
                chain_id,
                current,
                one_day,
                week,
            )
            return None
        return EthPrices(current=current, one_day=one_day, week=week)

    def fetch_current_eth_price(self, *, chain_id: int) -> Decimal | None:
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=CURRENT_ETH_PRICE_QUERY,
            variables={},
        )
        bundle = (payload.get("data") or {}).get("bundle") or {}
        return decimal_or_none(bundle.get("ethPriceUSD"))

    def fetch_positions_by_pools(self, *, chain_id: int, pool_ids: list[str]) -> list[PositionRecord]:
        ids = normalize_addresses(pool_ids)
        if not ids:
            return []
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=positions_by_pools_query(include_reinvest_l=self._settings.include_reinvest_l),
            variables={"poolIds": ids},
        )
        positions = self._map_positions(payload)
        logger.info(
            "univ3_subgraph_client: fetched_positions_by_pools pools=%s fetched=%s chain_id=%s",
            len(ids),
            len(positions),
            chain_id,
        )
        return positions

    def fetch_positions_by_owner(self, *, chain_id: int, owner: str) -> list[PositionRecord]:
        owner_id = normalize_address(owner)
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=positions_by_owner_query(include_reinvest_l=self._settings.include_reinvest_l),
            variables={"owner": owner_id},
        )
        positions = self._map_positions(payload)
        logger.info(
            "univ3_subgraph_client: fetched_positions_by_owner owner=%s fetched=%s chain_id=%s",
            owner_id,
            len(positions),
            chain_id,
        )
        return positions

    def fetch_user_events(self, *, chain_id: int, address: str) -> UserEvents:
        origin = normalize_address(address)
        payload = self._post_graphql(
            url=self._resolve_subgraph_url(chain_id),
            query=USER_TRANSACTIONS_QUERY,
            variables={"address": origin},
        )
        events = map_payload_to_user_events(payload.get("data") or {})
        logger.info(
            "univ3_subgraph_client: fetched_user_events address=%s mints=%s burns=%s swaps=%s chain_id=%s",
            origin,
            len(events.mints),
            len(events.burns),
            len(events.swaps),
            chain_id,
        )
        return events

    @staticmethod
    def _map_positions(payload: dict) -> list[PositionRecord]:
        rows = (payload.get("data") or {}).get("positions") or []
        return map_rows_to_position_records(rows)

    def _post_graphql(self, *, url: str, query: str, variables: dict) -> dict:
        attempts = max(1, self._settings.max_retries)
        delay = 0.25
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            self._respect_rate_limit()
            try:
                with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                    response = client.post(
                        url,
                        json={"query": query, "variables": variables},
                    )
                    response.raise_for_status()
                    payload = response.json()

                errors = payload.get("errors") or []
                if errors:
                    message = " | ".join(str(err.get("message", err)) for err in errors)
                    lower_msg = message.lower()
                    if "unknown argument \"block\"" in lower_msg or "argument \"block\"" in lower_msg:
                        raise SubgraphBlockNotSupportedError(
                            "Subgraph does not support queries pinned with the block argument."
                        )
                    raise SubgraphRequestError(message)

                return payload
            except SubgraphBlockNotSupportedError:
                raise
            except (httpx.HTTPError, SubgraphRequestError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "univ3_subgraph_client: graphql_retry attempt=%s/%s error=%s",
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(delay)
                delay *= 2

        raise SubgraphRequestError(f"GraphQL request failed after retries: {last_exc}") from last_exc

    def _respect_rate_limit(self) -> None:
        min_interval = max(0, self._settings.min_interval_ms) / 1000.0
        if min_interval <= 0:
            return

        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_at
            if elapsed < min_interval:
                time.sleep(min_interval - elapsed)
            self._last_request_at = time.monotonic()

    def _resolve_subgraph_url(self, chain_id: int) -> str:
        key = chain_key(chain_id)
        if not key:
            raise SubgraphResolutionError(f"Unsupported chain_id for subgraph resolution: {chain_id}")

        subgraph_id = str(self._settings.graph_subgraph_ids.get(key) or "").strip()
        if not subgraph_id:
            raise SubgraphResolutionError(
                f"Missing GRAPH_SUBGRAPH_ID for chain '{key}' (chain_id={chain_id})."
            )
        return self._build_gateway_url(subgraph_id)

    def _resolve_blocks_subgraph_url(self, chain_id: int) -> str:
        key = chain_key(chain_id)
        if not key:
            raise SubgraphResolutionError(f"Unsupported chain_id for blocks resolution: {chain_id}")

        subgraph_id = str(self._settings.graph_blocks_subgraph_ids.get(key) or "").strip()
        if not subgraph_id:
            raise SubgraphResolutionError(
                f"Missing GRAPH_BLOCKS_SUBGRAPH_ID for chain '{key}' (chain_id={chain_id})."
            )
        return self._build_gateway_url(subgraph_id)

    def _build_gateway_url(self, subgraph_id: str) -> str:
        if subgraph_id.startswith("http://") or subgraph_id.startswith("https://"):
            return subgraph_id.rstrip("/")
        base = self._settings.graph_gateway_base.rstrip("/")
        api_key = self._settings.graph_api_key.strip()
        if api_key:
            return f"{base}/{api_key}/subgraphs/id/{subgraph_id}"
        return f"{base}/subgraphs/id/{subgraph_id}"
