from __future__ import annotations

from dataclasses import dataclass, field

from dexinfo.domain.entities.transaction import NormalizedTransaction


@dataclass(frozen=True)
class ListUserTransactionsInput:
    chain_id: int
    address: str


@dataclass(frozen=True)
class ListUserTransactionsOutput:
    loading: bool
    error: bool
    data: list[NormalizedTransaction] = field(default_factory=list)
