from __future__ import annotations

from decimal import Decimal

from dexinfo.application.ports.block_resolver_port import BlockResolverPort
from dexinfo.application.ports.eth_price_port import EthPricePort
from dexinfo.application.ports.position_port import PositionPort
from dexinfo.application.ports.token_snapshot_port import TokenSnapshotPort
from dexinfo.application.ports.user_events_port import UserEventsPort
from dexinfo.domain.entities.position import PositionRecord
from dexinfo.domain.entities.snapshot_context import EthPrices, ResolvedBlock
from dexinfo.domain.entities.token_snapshot import TokenSnapshotBatch
from dexinfo.domain.entities.transaction import UserEvents
from dexinfo.domain.exceptions import SourceUnavailableError
from dexinfo.infrastructure.clients.univ3_subgraph_client import SubgraphError, Univ3SubgraphClient


class SubgraphTokenSnapshotAdapter(TokenSnapshotPort):
    def __init__(self, client: Univ3SubgraphClient):
        self._client = client

    def fetch_token_snapshots(
        self,
        *,
        chain_id: int,
        token_ids: list[str],
        block_number: int | None,
    ) -> TokenSnapshotBatch:
        try:
            return self._client.fetch_token_snapshots(
                chain_id=chain_id,
                token_ids=token_ids,
                block_number=block_number,
            )
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc

    def list_top_token_ids(self, *, chain_id: int, first: int) -> list[str]:
        try:
            return self._client.fetch_top_token_ids(chain_id=chain_id, first=first)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc


class SubgraphBlockResolverAdapter(BlockResolverPort):
    def __init__(self, client: Univ3SubgraphClient):
        self._client = client

    def resolve_blocks(
        self,
        *,
        chain_id: int,
        timestamps: list[int],
    ) -> list[ResolvedBlock | None]:
        try:
            return self._client.fetch_blocks_for_timestamps(chain_id=chain_id, timestamps=timestamps)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc


class SubgraphEthPriceAdapter(EthPricePort):
    def __init__(self, client: Univ3SubgraphClient):
        self._client = client

    def get_eth_prices(
        self,
        *,
        chain_id: int,
        one_day_block: int,
        week_block: int,
    ) -> EthPrices | None:
        try:
            return self._client.fetch_eth_prices(
                chain_id=chain_id,
                one_day_block=one_day_block,
                week_block=week_block,
            )
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc

    def get_current_eth_price(self, *, chain_id: int) -> Decimal | None:
        try:
            return self._client.fetch_current_eth_price(chain_id=chain_id)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc


class SubgraphPositionAdapter(PositionPort):
    def __init__(self, client: Univ3SubgraphClient):
        self._client = client

    def fetch_positions_by_pools(self, *, chain_id: int, pool_ids: list[str]) -> list[PositionRecord]:
        try:
            return self._client.fetch_positions_by_pools(chain_id=chain_id, pool_ids=pool_ids)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc

    def fetch_positions_by_owner(self, *, chain_id: int, owner: str) -> list[PositionRecord]:
        try:
            return self._client.fetch_positions_by_owner(chain_id=chain_id, owner=owner)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc


class SubgraphUserEventsAdapter(UserEventsPort):
    def __init__(self, client: Univ3SubgraphClient):
        self._client = client

    def fetch_user_events(self, *, chain_id: int, address: str) -> UserEvents:
        try:
            return self._client.fetch_user_events(chain_id=chain_id, address=address)
        except SubgraphError as exc:
            raise SourceUnavailableError(str(exc)) from exc
