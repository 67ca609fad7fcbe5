from __future__ import annotations

from dataclasses import dataclass

from dexinfo.domain.entities.position import FormattedPosition


@dataclass(frozen=True)
class ValuatePositionsInput:
    chain_id: int
    pool_ids: tuple[str, ...]


@dataclass(frozen=True)
class ValuateOwnerPositionsInput:
    chain_id: int
    owner: str


@dataclass(frozen=True)
class ValuatePositionsOutput:
    loading: bool
    error: bool
    positions: list[FormattedPosition] | None
