from __future__ import annotations

from typing import Protocol

from dexinfo.domain.entities.position import PositionRecord


class PositionPort(Protocol):
    def fetch_positions_by_pools(self, *, chain_id: int, pool_ids: list[str]) -> list[PositionRecord]:
        ...

    def fetch_positions_by_owner(self, *, chain_id: int, owner: str) -> list[PositionRecord]:
        ...
